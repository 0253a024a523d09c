"""
Persistence layer for generated profiles.

Provides:
- RedisClient: Pooled async Redis client factory
- ProfileRepository: get/set of ProfileResult keyed by user and context
"""

from profile_inference.persistence.redis_client import RedisClient
from profile_inference.persistence.repository import ProfileRepository

__all__ = ["RedisClient", "ProfileRepository"]
