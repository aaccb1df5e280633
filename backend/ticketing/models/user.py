"""
User model. The password is stored exactly as received; hashing belongs to
whatever sits in front of this service.
"""

from sqlalchemy import Column, Integer, String

from ticketing.db.base import Base


class User(Base):
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    rol = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    password = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, rol={self.rol})>"
