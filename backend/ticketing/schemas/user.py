"""
Pydantic schemas for user-related request/response validation.
"""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    rol: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)


class UserResponse(BaseModel):
    id: int
    name: str
    rol: str
    email: str

    model_config = {"from_attributes": True}


class UserCreated(BaseModel):
    message: str = "User created successfully!"
    id: int
