"""
Blacklist check endpoint.

POST /api/v1/blacklist answers whether a person is blacklisted, by NIK
or by name / birth place / birth date.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from blacklist_check.models.blacklist import (
    BlacklistCheckRequestDTO,
    BlacklistCheckResponseDTO,
)
from blacklist_check.services.blacklist_checker import BlacklistChecker
from blacklist_check.settings import settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/blacklist", tags=["blacklist"])


def get_blacklist_checker(request: Request) -> BlacklistChecker:
    """Return the checker wired by the application lifespan."""
    checker = getattr(request.app.state, "blacklist_checker", None)
    if checker is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Blacklist checker is not initialized",
        )
    return checker


@router.post(
    "",
    summary="Check whether a person is blacklisted",
    response_model=BlacklistCheckResponseDTO,
    response_model_exclude_none=True,
)
async def check_blacklist(
    check_data: BlacklistCheckRequestDTO,
    checker: BlacklistChecker = Depends(get_blacklist_checker),
) -> BlacklistCheckResponseDTO:
    """
    Check a person against the blacklist.

    Resolution order: exact NIK match, then fuzzy name match with equal
    birth place and birth date, then fuzzy name match with equal birth date.

    Args:
        check_data: Name plus optional NIK, birth place and birth date

    Returns:
        Whether the person is blacklisted, the reason and the match type
    """
    try:
        outcome = await asyncio.wait_for(
            checker.resolve(check_data.to_check_request()),
            timeout=settings.check_timeout,
        )
    except asyncio.TimeoutError:
        logger.error(f"Blacklist check timed out after {settings.check_timeout}s")
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Blacklist check timed out",
        )
    except Exception as e:
        logger.error(f"Error checking blacklist: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    return BlacklistCheckResponseDTO.from_outcome(outcome)
