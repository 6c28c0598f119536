"""Route Dependencies: owner identity and service construction per request.

Invariants:
    - One RankingService (and one SqlUnitOfWork) per request, bound to that
      request's AsyncSession
    - Owner identity is read from the X-User-Id header; no authentication

Design Decisions:
    - Malformed X-User-Id is an InvalidArgumentError (400), not a validation
      error, so the envelope matches the service's own argument errors
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from taskrank.config import get_settings
from taskrank.core.domain_types import OwnerId, parse_states
from taskrank.core.errors import InvalidArgumentError
from taskrank.infrastructure.database import get_db
from taskrank.infrastructure.repositories import SqlUnitOfWork
from taskrank.services.ranking_service import RankingService

OWNER_HEADER = "X-User-Id"


async def get_owner_id(
    x_user_id: str = Header(..., alias=OWNER_HEADER),
) -> OwnerId:
    """Parse the caller's owner id from the request header."""
    try:
        return OwnerId(UUID(x_user_id))
    except ValueError:
        raise InvalidArgumentError(
            f"{x_user_id} is not a valid owner id", OWNER_HEADER,
        ) from None


async def get_ranking_service(
    db: AsyncSession = Depends(get_db),
) -> RankingService:
    settings = get_settings()
    return RankingService(
        SqlUnitOfWork(db), default_states=parse_states(settings.default_states),
    )
