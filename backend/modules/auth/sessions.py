"""
Redis-backed session and verification-token stores.

Redis owns expiry: values are written with a TTL and never read back with
one. A missing key means "expired or never existed"; only driver failures
are errors.
"""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from shared.exceptions import StorageError
from shared.utils import random_string

logger = logging.getLogger(__name__)

VERIFICATION_TOKEN_LENGTH = 30


class SessionStore:
    """Maps session tokens to customer IDs."""

    def __init__(self, redis: Redis, prefix: str = "session:"):
        self._redis = redis
        self._prefix = prefix

    def _key(self, token: str) -> str:
        return f"{self._prefix}{token}"

    async def put(self, token: str, subject_id: str, ttl: int) -> None:
        try:
            await self._redis.set(self._key(token), subject_id, ex=ttl)
        except RedisError as e:
            raise _storage_error("storing session", e)

    async def get(self, token: str) -> Optional[str]:
        """Return the customer ID for token, or None if the session is gone."""
        try:
            value = await self._redis.get(self._key(token))
        except RedisError as e:
            raise _storage_error("fetching session", e)
        return value or None

    async def renew(self, token: str, ttl: int) -> bool:
        """Reset the TTL of an existing session. Returns False if it no longer exists."""
        try:
            return bool(await self._redis.expire(self._key(token), ttl))
        except RedisError as e:
            raise _storage_error("renewing session", e)

    async def delete(self, token: str) -> None:
        try:
            await self._redis.delete(self._key(token))
        except RedisError as e:
            raise _storage_error("deleting session", e)


class VerificationTokenStore:
    """One-time email verification tokens (token -> pending email address)."""

    def __init__(self, redis: Redis, prefix: str = "email_verification:"):
        self._redis = redis
        self._prefix = prefix

    def _key(self, token: str) -> str:
        return f"{self._prefix}{token}"

    async def issue(self, email: str, ttl: int) -> str:
        token = random_string(VERIFICATION_TOKEN_LENGTH)
        try:
            await self._redis.set(self._key(token), email, ex=ttl)
        except RedisError as e:
            raise _storage_error("storing verification token", e)
        return token

    async def redeem(self, token: str) -> Optional[str]:
        """Return the email bound to token, or None if unknown or expired."""
        try:
            value = await self._redis.get(self._key(token))
        except RedisError as e:
            raise _storage_error("fetching verification token", e)
        return value or None

    async def discard(self, token: str) -> None:
        try:
            await self._redis.delete(self._key(token))
        except RedisError as e:
            raise _storage_error("deleting verification token", e)


def _storage_error(action: str, error: RedisError) -> StorageError:
    logger.error("Redis error while %s: %s", action, error)
    return StorageError(f"Cache error while {action}", store="redis")
