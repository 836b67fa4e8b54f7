"""
Match Resolution Engine

Applies the tiered decision policy to a check request:

1. exact      - NIK resolves to a record
2. fuzzy_full - a similar-name candidate shares birth place and birth date
3. fuzzy_date - a similar-name candidate shares birth date only
4. none       - nothing above matched

Similarity scores only rank candidates; the decision itself rests on
exact equality of birth place and birth date.
"""

import logging
from typing import Callable, Iterable, List, Optional

from ...models.blacklist import CandidateRecord, CheckRequest, MatchKind, MatchOutcome
from .base_matcher import ExactLookupProvider, SimilaritySearchProvider


def first_matching_candidate(
    candidates: Iterable[CandidateRecord],
    predicate: Callable[[CandidateRecord], bool],
) -> Optional[CandidateRecord]:
    """
    Return the first candidate satisfying predicate, in iteration order.

    Args:
        candidates: Candidates in ranking order
        predicate: Field-equality check to apply

    Returns:
        The earliest matching candidate, or None
    """
    for candidate in candidates:
        if predicate(candidate):
            return candidate
    return None


class MatchResolutionEngine:
    """
    Classifies a check request against the blacklist.

    Stateless apart from its collaborators; safe to share between
    concurrent requests.
    """

    def __init__(
        self,
        exact_provider: ExactLookupProvider,
        similarity_provider: SimilaritySearchProvider,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize engine with its providers.

        Args:
            exact_provider: Exact NIK lookup
            similarity_provider: Fuzzy name search
            logger: Logger to report decisions to (defaults to module logger)
        """
        self.exact_provider = exact_provider
        self.similarity_provider = similarity_provider
        self.logger = logger or logging.getLogger(__name__)

    async def classify(self, request: CheckRequest) -> MatchOutcome:
        """
        Resolve a request to a match outcome.

        Provider errors propagate unchanged.

        Args:
            request: The check request

        Returns:
            Classified match outcome
        """
        if request.nik:
            record = await self.exact_provider.find_by_nik(request.nik)
            if record is not None:
                self.logger.info(
                    f"Found blacklist record by NIK (nik={request.nik}, "
                    f"match_kind={MatchKind.EXACT.value})",
                )
                return MatchOutcome.matched(record, MatchKind.EXACT)

        # Without a birth date neither fuzzy tier can fire
        if request.birth_date is None:
            self.logger.info(
                f"No blacklist record found (name={request.name!r}, birth date absent, "
                f"match_kind={MatchKind.NONE.value})",
            )
            return MatchOutcome.no_match()

        candidates = await self.similarity_provider.find_similar(
            request.name,
            request.birth_place,
            request.birth_date,
        )
        outcome = self.select_fuzzy_outcome(request, candidates)

        if outcome.blacklisted:
            self.logger.info(
                f"Found blacklist record by fuzzy match (name={request.name!r}, "
                f"birth_place={request.birth_place!r}, birth_date={request.birth_date.isoformat()}, "
                f"match_kind={outcome.match_kind.value})",
            )
        else:
            self.logger.info(
                f"No blacklist record found (name={request.name!r}, "
                f"candidates={len(candidates)}, match_kind={MatchKind.NONE.value})",
            )
        return outcome

    @staticmethod
    def select_fuzzy_outcome(
        request: CheckRequest,
        candidates: List[CandidateRecord],
    ) -> MatchOutcome:
        """
        Apply the fuzzy tiers to an already ranked candidate list.

        Args:
            request: The check request (birth date required for any match)
            candidates: Candidates in ranking order

        Returns:
            fuzzy_full, fuzzy_date or none outcome
        """
        if request.birth_date is None:
            return MatchOutcome.no_match()

        if request.birth_place is not None:
            full = first_matching_candidate(
                candidates,
                lambda c: c.birth_place == request.birth_place and c.birth_date == request.birth_date,
            )
            if full is not None:
                return MatchOutcome.matched(full, MatchKind.FUZZY_FULL)

        by_date = first_matching_candidate(
            candidates,
            lambda c: c.birth_date == request.birth_date,
        )
        if by_date is not None:
            return MatchOutcome.matched(by_date, MatchKind.FUZZY_DATE)

        return MatchOutcome.no_match()
