"""
Redis-backed cache for blacklist check outcomes.

Every failure mode (missing client, Redis errors, malformed payloads) is
absorbed here: reads degrade to a miss and writes report False, so the
caller never has to handle cache trouble.
"""

import hashlib
import json
import logging
from typing import Optional

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..models.blacklist import CheckRequest, MatchOutcome

DEFAULT_TTL_SECONDS = 24 * 60 * 60


def build_cache_key(request: CheckRequest, prefix: str = "blacklist") -> str:
    """
    Derive the cache key for a request.

    With a NIK the key depends on the NIK alone, since it is authoritative.
    Otherwise it is a digest of name, birth place and ISO birth date, with
    absent fields encoded as null so they never collide with empty strings.

    :param request: Check request
    :param prefix: Key namespace
    :return: Cache key
    """
    if request.nik:
        return f"{prefix}:nik:{request.nik}"

    fingerprint = json.dumps(
        [
            request.name,
            request.birth_place,
            request.birth_date.isoformat() if request.birth_date else None,
        ],
        ensure_ascii=False,
        separators=(",", ":"),
    )
    digest = hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()
    return f"{prefix}:fuzzy:{digest}"


class ResultCache:
    """Cache-aside storage for MatchOutcome values."""

    def __init__(
        self,
        client: Optional[Redis],
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize cache.

        :param client: Redis client, None to run without a cache
        :param ttl_seconds: Expiry applied to every write
        :param logger: Logger for cache errors (defaults to module logger)
        """
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)

    async def get(self, key: str) -> Optional[MatchOutcome]:
        """
        Read an outcome from the cache.

        :param key: Cache key
        :return: Cached outcome, or None on miss, error or malformed payload
        """
        if self.client is None:
            return None

        try:
            payload = await self.client.get(key)
        except RedisError as e:
            self.logger.warning(f"Cache read failed for {key}: {e}")
            return None

        if payload is None:
            return None

        try:
            return MatchOutcome.from_cache_payload(payload)
        except ValidationError as e:
            self.logger.warning(f"Discarding malformed cached value for {key}: {e.error_count()} errors")
            return None

    async def set(self, key: str, outcome: MatchOutcome) -> bool:
        """
        Write an outcome to the cache with the configured expiry.

        :param key: Cache key
        :param outcome: Outcome to store
        :return: True if stored, False otherwise
        """
        if self.client is None:
            return False

        try:
            await self.client.set(key, outcome.to_cache_payload(), ex=self.ttl_seconds)
            return True
        except RedisError as e:
            self.logger.error(f"Error caching result for {key}: {e}")
            return False
