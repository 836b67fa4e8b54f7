"""
Services package for the blacklist check service.

Match resolution, result caching and the cache-aside checker that
combines them.
"""

from .blacklist_checker import BlacklistChecker, build_blacklist_checker
from .blacklist_matcher import MatchResolutionEngine
from .result_cache import ResultCache, build_cache_key

__all__ = [
    "BlacklistChecker",
    "build_blacklist_checker",
    "MatchResolutionEngine",
    "ResultCache",
    "build_cache_key",
]
