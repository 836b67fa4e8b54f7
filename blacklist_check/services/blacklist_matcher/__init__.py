"""
Blacklist Matcher Service

Tiered match resolution for blacklist checks: exact NIK lookup first,
then fuzzy name search gated on birth place and birth date equality.
"""

from .base_matcher import ExactLookupProvider, SimilaritySearchProvider
from .resolution_engine import MatchResolutionEngine, first_matching_candidate

__all__ = [
    "ExactLookupProvider",
    "SimilaritySearchProvider",
    "MatchResolutionEngine",
    "first_matching_candidate",
]
