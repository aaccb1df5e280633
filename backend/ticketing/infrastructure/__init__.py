"""
Connections to external systems, opened and closed by the application lifespan.
"""

from .redis_client import create_redis, close_redis

__all__ = ['create_redis', 'close_redis']
