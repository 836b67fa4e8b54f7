"""
Blacklist-related Pydantic models.

This module contains:
- CheckRequest / CandidateRecord / MatchOutcome: core data models
- API DTOs for the blacklist check endpoint
"""

from datetime import date
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ===============================
# Core Data Models
# ===============================


class MatchKind(str, Enum):
    """Tier of the decision policy that produced an outcome."""

    EXACT = "exact"
    FUZZY_FULL = "fuzzy_full"
    FUZZY_DATE = "fuzzy_date"
    NONE = "none"


class CheckRequest(BaseModel):
    """Input to a single blacklist check."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Full name of the person")
    nik: Optional[str] = Field(None, description="National identity number (exact-match key)")
    birth_place: Optional[str] = Field(None, description="Place of birth")
    birth_date: Optional[date] = Field(None, description="Date of birth")


class CandidateRecord(BaseModel):
    """A blacklist entry surfaced by a lookup or similarity search."""

    nik: Optional[str] = Field(None, description="National identity number")
    name: str = Field(..., description="Full name")
    birth_place: Optional[str] = Field(None, description="Place of birth")
    birth_date: Optional[date] = Field(None, description="Date of birth")
    reason: str = Field("", description="Why this person is blacklisted")
    # Set by the similarity search only, never stored
    similarity_score: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description="Name similarity to the query",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nik": "3171234567890123",
                "name": "John Doe",
                "birth_place": "Jakarta",
                "birth_date": "1990-01-01",
                "reason": "court order",
            },
        },
    )


class MatchOutcome(BaseModel):
    """
    Result of a blacklist resolution.

    This is the unit that is cached and returned to callers, so it must
    survive a round trip through its JSON payload unchanged.
    """

    model_config = ConfigDict(frozen=True)

    blacklisted: bool
    details: str = ""
    match_kind: MatchKind

    @model_validator(mode="after")
    def _check_consistency(self) -> "MatchOutcome":
        if (self.match_kind == MatchKind.NONE) == self.blacklisted:
            raise ValueError(
                f"match_kind={self.match_kind.value} is inconsistent with "
                f"blacklisted={self.blacklisted}",
            )
        if not self.blacklisted and self.details:
            raise ValueError("details must be empty when not blacklisted")
        return self

    @classmethod
    def no_match(cls) -> "MatchOutcome":
        return cls(blacklisted=False, details="", match_kind=MatchKind.NONE)

    @classmethod
    def matched(cls, record: CandidateRecord, match_kind: MatchKind) -> "MatchOutcome":
        return cls(blacklisted=True, details=record.reason, match_kind=match_kind)

    def to_cache_payload(self) -> bytes:
        """Serialize to the JSON bytes stored in the cache."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_cache_payload(cls, payload: Union[bytes, str]) -> "MatchOutcome":
        """
        Rebuild an outcome from a cached payload.

        :raises pydantic.ValidationError: if the payload is malformed.
        """
        return cls.model_validate_json(payload)


# ===============================
# API DTOs
# ===============================


class BlacklistCheckRequestDTO(BaseModel):
    """Request body for POST /api/v1/blacklist."""

    name: str = Field(
        ...,
        min_length=3,
        description="Full name, at least 3 characters",
    )
    nik: Optional[str] = Field(
        None,
        pattern=r"^\d{16}$",
        description="16-digit national identity number",
    )
    birth_place: Optional[str] = Field(None, description="Place of birth")
    birth_date: Optional[date] = Field(None, description="Date of birth (YYYY-MM-DD)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "John Doe",
                "birth_place": "Jakarta",
                "birth_date": "1990-01-01",
            },
        },
    )

    def to_check_request(self) -> CheckRequest:
        return CheckRequest(
            name=self.name,
            nik=self.nik,
            birth_place=self.birth_place,
            birth_date=self.birth_date,
        )


class BlacklistCheckResponseDTO(BaseModel):
    """Response body for POST /api/v1/blacklist."""

    blacklisted: bool = Field(..., description="Whether a blacklist entry matched")
    details: Optional[str] = Field(None, description="Blacklist reason, omitted when not blacklisted")
    match_type: MatchKind = Field(..., description="Tier that decided the outcome")

    @classmethod
    def from_outcome(cls, outcome: MatchOutcome) -> "BlacklistCheckResponseDTO":
        return cls(
            blacklisted=outcome.blacklisted,
            details=outcome.details or None,
            match_type=outcome.match_kind,
        )
