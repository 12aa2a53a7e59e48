"""
Session store for the auth service.
TTL-scoped key/value operations over Redis for refresh tokens, password
reset tokens and login-attempt counters.
"""

import logging
from datetime import timedelta
from typing import List, Optional, Union

import redis.asyncio as redis
from redis.exceptions import RedisError, TimeoutError as RedisTimeoutError, WatchError

from authservice.core.config import Settings
from authservice.core.constants import CacheKey
from authservice.core.exceptions import StoreError


logger = logging.getLogger("authservice.store")

TTL = Union[int, timedelta]


def _seconds(ttl: TTL) -> int:
    seconds = int(ttl.total_seconds()) if isinstance(ttl, timedelta) else int(ttl)
    if seconds <= 0:
        raise ValueError("ttl must be positive")
    return seconds


def create_redis_client(settings: Settings) -> redis.Redis:
    """
    Create a pooled Redis client from settings.

    Args:
        settings: Application settings

    Returns:
        Redis client
    """
    pool = redis.ConnectionPool.from_url(
        settings.REDIS_URL,
        max_connections=settings.REDIS_POOL_SIZE,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        decode_responses=True
    )
    return redis.Redis(connection_pool=pool)


class SessionStore:
    """
    Redis-backed session store.

    Every Redis failure surfaces as StoreError; timeouts are flagged as
    transient so callers may retry idempotent reads.
    """

    def __init__(self, redis_client: redis.Redis):
        """
        Initialize session store.

        Args:
            redis_client: Redis client created with decode_responses=True
        """
        self.redis = redis_client

    @staticmethod
    def _wrap(operation: str, key: str, error: RedisError) -> StoreError:
        transient = isinstance(error, RedisTimeoutError)
        logger.error(f"Redis {operation} failed for {key.split(':', 1)[0]}: {error}")
        return StoreError(f"session store {operation} failed", transient=transient)

    # Generic operations

    async def set(self, key: str, value: str, ttl: TTL) -> None:
        """Set key to value with a TTL."""
        try:
            await self.redis.set(key, value, ex=_seconds(ttl))
        except RedisError as e:
            raise self._wrap("set", key, e) from e

    async def get(self, key: str) -> Optional[str]:
        """Return the value of key, or None if absent or expired."""
        try:
            return await self.redis.get(key)
        except RedisError as e:
            raise self._wrap("get", key, e) from e

    async def delete(self, *keys: str) -> int:
        """Delete keys and return how many existed."""
        if not keys:
            return 0
        try:
            return await self.redis.delete(*keys)
        except RedisError as e:
            raise self._wrap("delete", keys[0], e) from e

    async def pop(self, key: str) -> Optional[str]:
        """Atomically read and delete key."""
        try:
            return await self.redis.getdel(key)
        except RedisError as e:
            raise self._wrap("getdel", key, e) from e

    async def increment(self, key: str, ttl: TTL, refresh_ttl: bool = False) -> int:
        """
        Atomically increment a counter, creating it with a TTL if new.

        The initialisation, increment and optional TTL refresh run inside a
        single MULTI/EXEC, so concurrent callers are each counted exactly once.

        Args:
            key: Counter key
            ttl: Expiry applied when the counter is created
            refresh_ttl: Also reset the expiry on every increment (sliding window)

        Returns:
            Counter value after the increment
        """
        seconds = _seconds(ttl)
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(key, 0, ex=seconds, nx=True)
                pipe.incr(key)
                if refresh_ttl:
                    pipe.expire(key, seconds)
                results = await pipe.execute()
        except RedisError as e:
            raise self._wrap("increment", key, e) from e
        return int(results[1])

    async def ttl(self, key: str) -> int:
        """Remaining TTL in seconds (-2 if absent, -1 if no expiry)."""
        try:
            return await self.redis.ttl(key)
        except RedisError as e:
            raise self._wrap("ttl", key, e) from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            raise self._wrap("ping", "health", e) from e

    # Refresh tokens

    async def set_refresh_token(self, jti: str, user_id: str, ttl: TTL) -> None:
        """
        Persist a refresh token record and index it under its user.

        Args:
            jti: Token id
            user_id: Owner of the token
            ttl: Refresh token lifetime
        """
        seconds = _seconds(ttl)
        sessions_key = CacheKey.user_sessions(user_id)
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(CacheKey.refresh_token(jti), user_id, ex=seconds)
                pipe.sadd(sessions_key, jti)
                pipe.expire(sessions_key, seconds)
                await pipe.execute()
        except RedisError as e:
            raise self._wrap("set", CacheKey.refresh_token(jti), e) from e

    async def get_refresh_token(self, jti: str) -> Optional[str]:
        """Return the user id owning a refresh token, or None."""
        return await self.get(CacheKey.refresh_token(jti))

    async def delete_refresh_token(self, jti: str, user_id: Optional[str] = None) -> bool:
        """
        Delete a refresh token record.

        Returns:
            True if the record existed
        """
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(CacheKey.refresh_token(jti))
                if user_id:
                    pipe.srem(CacheKey.user_sessions(user_id), jti)
                results = await pipe.execute()
        except RedisError as e:
            raise self._wrap("delete", CacheKey.refresh_token(jti), e) from e
        return bool(results[0])

    async def revoke_user_sessions(self, user_id: str) -> int:
        """
        Delete every refresh token record indexed under a user.

        The index is watched while it is read, so a token indexed by a
        concurrent login aborts the transaction and the read is retried.

        Returns:
            Number of refresh records removed
        """
        sessions_key = CacheKey.user_sessions(user_id)
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                while True:
                    try:
                        await pipe.watch(sessions_key)
                        jtis: List[str] = list(await pipe.smembers(sessions_key))
                        keys = [CacheKey.refresh_token(jti) for jti in jtis]
                        pipe.multi()
                        if keys:
                            pipe.delete(*keys)
                        pipe.delete(sessions_key)
                        results = await pipe.execute()
                        break
                    except WatchError:
                        logger.debug(f"Session index for user {user_id} changed during revoke; retrying")
        except RedisError as e:
            raise self._wrap("revoke", sessions_key, e) from e
        return int(results[0]) if keys else 0

    # Password reset tokens

    async def set_password_reset_token(self, token: str, user_id: str, ttl: TTL) -> None:
        await self.set(CacheKey.password_reset(token), user_id, ttl)

    async def get_password_reset_token(self, token: str) -> Optional[str]:
        return await self.get(CacheKey.password_reset(token))

    async def consume_password_reset_token(self, token: str) -> Optional[str]:
        """
        Resolve and delete a reset token in one step.
        Two concurrent callers can never both receive the user id.
        """
        return await self.pop(CacheKey.password_reset(token))

    async def delete_password_reset_token(self, token: str) -> bool:
        return bool(await self.delete(CacheKey.password_reset(token)))

    # Login attempts

    async def increment_login_attempts(self, identity: str, ttl: TTL) -> int:
        """Count a failed login; each failure restarts the lockout window."""
        return await self.increment(CacheKey.login_attempts(identity), ttl, refresh_ttl=True)

    async def get_login_attempts(self, identity: str) -> int:
        value = await self.get(CacheKey.login_attempts(identity))
        return int(value) if value else 0

    async def clear_login_attempts(self, identity: str) -> None:
        await self.delete(CacheKey.login_attempts(identity))

    async def close(self) -> None:
        """Close Redis connection."""
        await self.redis.aclose()
