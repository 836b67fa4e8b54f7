"""
Blacklist checker: cache-aside front of the match resolution engine.

Concurrent checks for the same uncached key are not coalesced; each one
misses and resolves on its own. Put a request-coalescing layer in front
of this class if strict deduplication is required.
"""

import logging
from typing import Optional

from redis.asyncio import Redis

from ..db.blacklist_dao import BlacklistDAO
from ..models.blacklist import CheckRequest, MatchOutcome
from ..settings import Settings
from .blacklist_matcher import MatchResolutionEngine
from .result_cache import ResultCache, build_cache_key


class BlacklistChecker:
    """Resolve check requests, serving repeats from the result cache."""

    def __init__(
        self,
        engine: MatchResolutionEngine,
        cache: ResultCache,
        key_prefix: str = "blacklist",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.engine = engine
        self.cache = cache
        self.key_prefix = key_prefix
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(self, request: CheckRequest) -> MatchOutcome:
        """
        Check a person against the blacklist.

        At most one cache read, one engine run and one cache write happen
        per call. Cache problems never fail the call; provider errors do,
        and nothing is cached in that case.

        :param request: Check request
        :return: Match outcome
        """
        cache_key = build_cache_key(request, self.key_prefix)

        cached = await self.cache.get(cache_key)
        if cached is not None:
            self.logger.info(
                f"Cache hit for blacklist check (cache_key={cache_key}, "
                f"match_kind={cached.match_kind.value})",
            )
            return cached

        outcome = await self.engine.classify(request)

        if not await self.cache.set(cache_key, outcome):
            self.logger.debug(f"Outcome for {cache_key} was not cached")

        return outcome


def build_blacklist_checker(
    settings: Settings,
    dao: BlacklistDAO,
    redis_client: Optional[Redis],
) -> BlacklistChecker:
    """
    Wire a checker from settings and live connections.

    :param settings: Application settings
    :param dao: Blacklist DAO serving both lookup providers
    :param redis_client: Redis client, None to run without a cache
    :return: Ready checker
    """
    engine = MatchResolutionEngine(exact_provider=dao, similarity_provider=dao)
    cache = ResultCache(redis_client, ttl_seconds=settings.cache_ttl_seconds)
    return BlacklistChecker(engine, cache, key_prefix=settings.cache_key_prefix)
