"""Owner Routes: register and list task owners.

Invariants:
    - Owners are only created here; the ranking core just checks they exist
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskrank.infrastructure.database import get_db
from taskrank.models.owner import Owner
from taskrank.schemas.owner import OwnerCreate, OwnerResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post(
    "", response_model=OwnerResponse, status_code=status.HTTP_201_CREATED,
)
async def create_owner(
    body: OwnerCreate, response: Response, db: AsyncSession = Depends(get_db),
):
    owner = Owner(name=body.name)
    db.add(owner)
    await db.commit()
    await db.refresh(owner)
    logger.info("Owner created", extra={"owner_id": str(owner.id)})
    response.headers["Location"] = f"{router.prefix}/{owner.id}"
    return owner


@router.get("", response_model=list[OwnerResponse])
async def list_owners(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Owner).order_by(Owner.name))
    return result.scalars().all()
