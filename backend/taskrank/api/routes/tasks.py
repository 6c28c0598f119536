"""Task Routes: create, list in manual order, edit, complete/reopen, rerank.

Invariants:
    - Routes only translate HTTP <-> RankingService calls; no ordering logic here
    - The caller's owner id always comes from get_owner_id, never from the body
    - complete/reopen answer 200 for both Updated and NotModified; the
      X-Task-Result header tells them apart

Design Decisions:
    - /rerank registered before /{task_id} so the literal path wins
    - Unknown ?state= tokens surface as InvalidArgumentError (400) from the service
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from taskrank.api.dependencies import get_owner_id, get_ranking_service
from taskrank.core.domain_types import OwnerId, TaskResult
from taskrank.schemas.task import (
    RankingResponse, RerankRequest, TaskCreate, TaskResponse, TaskUpdate,
)
from taskrank.services.ranking_service import RankingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])

RESULT_HEADER = "X-Task-Result"


@router.post(
    "", response_model=TaskResponse, status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreate,
    response: Response,
    owner_id: OwnerId = Depends(get_owner_id),
    service: RankingService = Depends(get_ranking_service),
):
    task = await service.create_task(body.title, owner_id)
    response.headers["Location"] = f"{router.prefix}/{task.id}"
    return task


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    state: list[str] | None = Query(None),
    owner_id: OwnerId = Depends(get_owner_id),
    service: RankingService = Depends(get_ranking_service),
):
    """Caller's tasks (default: open only) in manual order."""
    return await service.query_by_owner(owner_id, state)


@router.post("/rerank", response_model=RankingResponse)
async def rerank_tasks(
    body: RerankRequest,
    owner_id: OwnerId = Depends(get_owner_id),
    service: RankingService = Depends(get_ranking_service),
):
    """Replace the caller's manual order."""
    return await service.save_rankings(owner_id, body.rankings)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    service: RankingService = Depends(get_ranking_service),
):
    return await service.get_task(task_id)


@router.post("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    service: RankingService = Depends(get_ranking_service),
):
    return await service.update(task_id, body.to_patch())


@router.post("/{task_id}/complete", response_model=TaskResponse)
async def complete_task(
    task_id: int,
    response: Response,
    service: RankingService = Depends(get_ranking_service),
):
    return _with_result_header(await service.complete_task(task_id), response)


@router.post("/{task_id}/reopen", response_model=TaskResponse)
async def reopen_task(
    task_id: int,
    response: Response,
    service: RankingService = Depends(get_ranking_service),
):
    return _with_result_header(await service.reopen_task(task_id), response)


def _with_result_header(result: TaskResult, response: Response):
    response.headers[RESULT_HEADER] = (
        "updated" if result.modified else "not-modified"
    )
    return result.task
