"""
Models package for the blacklist check service.

This package contains all Pydantic models for:
- Core check request / candidate / outcome models
- API request/response DTOs
"""

from .blacklist import (
    BlacklistCheckRequestDTO,
    BlacklistCheckResponseDTO,
    CandidateRecord,
    CheckRequest,
    MatchKind,
    MatchOutcome,
)

__all__ = [
    "CheckRequest",
    "CandidateRecord",
    "MatchKind",
    "MatchOutcome",
    "BlacklistCheckRequestDTO",
    "BlacklistCheckResponseDTO",
]
