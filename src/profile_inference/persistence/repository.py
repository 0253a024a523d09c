"""
Repository for generated profiles, stored in Redis.

Storage Strategy:
- Profiles: String per user and context, key = "profile:{user_id}:{context}",
  value = ProfileResult JSON, expiring after PROFILE_TTL_SECONDS
- Context index: Set "profile:{user_id}:contexts" listing stored contexts

A context is whatever scopes a profile for the caller (usually the macro
category it was generated for). Storage failures are logged and reported
through return values; a cache miss must never fail a request.
"""

from typing import Optional

import structlog
from redis.asyncio import Redis

from profile_inference.models.profile_models import ProfileResult

logger = structlog.get_logger(__name__)


class ProfileRepository:
    """
    Async get/set store for ProfileResult objects.
    """

    KEY_PREFIX = "profile:"
    CONTEXT_INDEX_SUFFIX = "contexts"

    def __init__(self, redis_client: Redis, ttl_seconds: int = 7 * 86400):
        """
        Initialize repository.

        Args:
            redis_client: Async Redis client
            ttl_seconds: Expiry of stored profiles
        """
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    def key(self, user_id: str, context: str) -> str:
        return f"{self.KEY_PREFIX}{user_id}:{context}"

    def index_key(self, user_id: str) -> str:
        return f"{self.KEY_PREFIX}{user_id}:{self.CONTEXT_INDEX_SUFFIX}"

    async def get(self, user_id: str, context: str) -> Optional[ProfileResult]:
        """
        Load a stored profile.

        Returns:
            ProfileResult if found and decodable, None otherwise
        """
        key = self.key(user_id, context)
        try:
            payload = await self.redis.get(key)
        except Exception as e:
            logger.error("Failed to read profile", key=key, error=str(e))
            return None

        if payload is None:
            logger.debug("Profile not found", key=key)
            return None

        try:
            return ProfileResult.model_validate_json(payload)
        except ValueError as e:
            logger.warning("Discarding undecodable stored profile", key=key, error=str(e))
            return None

    async def set(self, user_id: str, context: str, result: ProfileResult) -> bool:
        """
        Store a profile with TTL and index its context.

        Returns:
            True if saved successfully
        """
        key = self.key(user_id, context)
        try:
            await self.redis.setex(key, self.ttl_seconds, result.model_dump_json())
            await self.redis.sadd(self.index_key(user_id), context)
            await self.redis.expire(self.index_key(user_id), self.ttl_seconds)
        except Exception as e:
            logger.error("Failed to save profile", key=key, error=str(e))
            return False

        logger.info("Saved profile", key=key, ttl=self.ttl_seconds, degraded=result.degraded)
        return True

    async def delete(self, user_id: str, context: str) -> bool:
        """
        Delete a stored profile.

        Returns:
            True if a profile was deleted
        """
        key = self.key(user_id, context)
        try:
            deleted = await self.redis.delete(key)
            await self.redis.srem(self.index_key(user_id), context)
        except Exception as e:
            logger.error("Failed to delete profile", key=key, error=str(e))
            return False
        return bool(deleted)

    async def list_contexts(self, user_id: str) -> list[str]:
        """Contexts with a stored profile for the user, sorted."""
        try:
            contexts = await self.redis.smembers(self.index_key(user_id))
        except Exception as e:
            logger.error("Failed to list profile contexts", user_id=user_id, error=str(e))
            return []
        return sorted(contexts)
