"""
Base Blacklist Matcher

Defines the provider interfaces the resolution engine queries.
"""

from datetime import date
from typing import List, Optional, Protocol, runtime_checkable

from ...models.blacklist import CandidateRecord


@runtime_checkable
class ExactLookupProvider(Protocol):
    """Keyed store resolving a NIK to at most one record."""

    async def find_by_nik(self, nik: str) -> Optional[CandidateRecord]:
        """
        Look up a record by NIK.

        Returns None when no record exists; raises on storage failure.
        """
        ...


@runtime_checkable
class SimilaritySearchProvider(Protocol):
    """
    Text-similarity index over blacklisted names.

    Contract: only candidates scoring strictly above the configured
    threshold, best score first, at most the configured number of entries.
    Narrowing by birth place or birth date is an optimization; the engine
    enforces equality itself.
    """

    async def find_similar(
        self,
        name: str,
        birth_place: Optional[str] = None,
        birth_date: Optional[date] = None,
    ) -> List[CandidateRecord]:
        ...
