"""
Pytest configuration and shared fixtures.
"""

import asyncio
from datetime import date
from typing import Dict, List, Optional

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from blacklist_check.models.blacklist import CandidateRecord, CheckRequest
from blacklist_check.services.blacklist_checker import BlacklistChecker
from blacklist_check.services.blacklist_matcher import MatchResolutionEngine
from blacklist_check.services.result_cache import ResultCache


class StubExactProvider:
    """Exact lookup returning records from a dict, counting calls."""

    def __init__(self, records: Optional[Dict[str, CandidateRecord]] = None, error: Optional[Exception] = None):
        self.records = records or {}
        self.error = error
        self.calls: List[str] = []

    async def find_by_nik(self, nik: str) -> Optional[CandidateRecord]:
        self.calls.append(nik)
        if self.error is not None:
            raise self.error
        return self.records.get(nik)


class StubSimilarityProvider:
    """Similarity search returning a fixed ranked list, counting calls."""

    def __init__(self, candidates: Optional[List[CandidateRecord]] = None, error: Optional[Exception] = None):
        self.candidates = candidates or []
        self.error = error
        self.calls: List[tuple] = []

    async def find_similar(self, name, birth_place=None, birth_date=None) -> List[CandidateRecord]:
        self.calls.append((name, birth_place, birth_date))
        if self.error is not None:
            raise self.error
        return list(self.candidates)


class HangingSimilarityProvider:
    """Similarity search that never answers until cancelled."""

    def __init__(self):
        self.started = asyncio.Event()
        self.cancelled = False

    async def find_similar(self, name, birth_place=None, birth_date=None) -> List[CandidateRecord]:
        self.started.set()
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return []


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis get/set."""

    def __init__(self, fail_get: bool = False, fail_set: bool = False):
        self.store: Dict[str, bytes] = {}
        self.expiry: Dict[str, int] = {}
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.get_calls = 0
        self.set_calls = 0

    async def get(self, key: str) -> Optional[bytes]:
        self.get_calls += 1
        if self.fail_get:
            raise RedisConnectionError("redis is down")
        return self.store.get(key)

    async def set(self, key: str, value: bytes, ex: Optional[int] = None) -> bool:
        self.set_calls += 1
        if self.fail_set:
            raise RedisConnectionError("redis is down")
        self.store[key] = value
        self.expiry[key] = ex
        return True


@pytest.fixture
def fuzzy_request() -> CheckRequest:
    """Request without NIK, with birth place and birth date."""
    return CheckRequest(name="John Doe", birth_place="Jakarta", birth_date=date(1990, 1, 1))


@pytest.fixture
def court_order_record() -> CandidateRecord:
    return CandidateRecord(
        nik="1234567890123456",
        name="John Doe",
        birth_place="Jakarta",
        birth_date=date(1990, 1, 1),
        reason="court order",
    )


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


def make_checker(
    exact: StubExactProvider,
    similarity: StubSimilarityProvider,
    redis_client: Optional[FakeRedis],
) -> BlacklistChecker:
    """Build a checker over stubs, the way build_blacklist_checker wires real ones."""
    engine = MatchResolutionEngine(exact_provider=exact, similarity_provider=similarity)
    cache = ResultCache(redis_client, ttl_seconds=24 * 60 * 60)
    return BlacklistChecker(engine, cache)
