"""Ranking Service: task lifecycle and manual ordering for one owner at a time.

Invariants:
    - Every public operation runs inside exactly one uow.transaction()
    - Arguments are validated before any repository call
    - A ranking record is never created by a read; only save_rankings creates it
    - save_rankings replaces the stored id list wholesale (last writer wins)
    - Stored ids always belong to the saving owner; foreign ids are dropped on save
    - complete/reopen on a task already in the target state writes nothing and
      returns NotModified

Design Decisions:
    - Ranking and task list fetched with asyncio.gather, merged by the pure
      merge_order only after both reads complete
    - No version token on the ranking record: reordering is a single-user,
      low-contention action
    - Duplicate ids in a save are stored as given; merge_order counts the first
"""

import asyncio
import logging
from typing import Iterable, Sequence

from taskrank.core.domain_types import (
    DEFAULT_STATES, NotModified, OwnerId, TaskId, TaskPatch, TaskResult,
    TaskState, Updated, parse_states,
)
from taskrank.core.errors import (
    InvalidArgumentError, OwnerNotFoundError, TaskNotFoundError,
)
from taskrank.core.order_merge import merge_order
from taskrank.core.repository_protocols import RankingLike, TaskLike, UnitOfWork

logger = logging.getLogger(__name__)


class RankingService:
    """The only entry point callers use for tasks and their order."""

    def __init__(
        self,
        uow: UnitOfWork,
        default_states: frozenset[TaskState] = DEFAULT_STATES,
    ):
        self._uow = uow
        self._default_states = default_states

    # ─── Reads ───────────────────────────────────────────────────

    async def query_by_owner(
        self, owner_id: OwnerId, states: Iterable[str] | None = None,
    ) -> list[TaskLike]:
        """Owner's tasks in the given states, in manual order then creation order.

        Raises:
            InvalidArgumentError: a state token is unknown (before any IO).
        """
        if isinstance(states, str):
            states = [states]
        tokens = list(states or [])
        wanted = parse_states(tokens) if tokens else self._default_states
        logger.debug(
            "Querying tasks",
            extra={
                "owner_id": str(owner_id),
                "states": sorted(s.value for s in wanted),
            },
        )
        async with self._uow.transaction():
            ranked_ids, tasks = await asyncio.gather(
                self._load_ranked_ids(owner_id),
                self._uow.tasks.find_by_owner_and_states(owner_id, wanted),
            )
        return merge_order(tasks, ranked_ids)

    async def get_task(self, task_id: TaskId) -> TaskLike:
        _check_task_id(task_id)
        async with self._uow.transaction():
            return await self._get_task_or_raise(task_id)

    # ─── Writes ──────────────────────────────────────────────────

    async def create_task(self, title: str, owner_id: OwnerId) -> TaskLike:
        """Create an Open task. It is unranked until the next save_rankings."""
        if title is None or not title.strip():
            raise InvalidArgumentError("title cannot be empty or whitespace", "title")
        async with self._uow.transaction():
            await self._require_owner(owner_id)
            task = await self._uow.tasks.persist(
                self._uow.tasks.new_task(title, owner_id),
            )
        logger.info(
            "Task created", extra={"owner_id": str(owner_id), "task_id": task.id},
        )
        return task

    async def update(self, task_id: TaskId, patch: TaskPatch) -> TaskLike:
        """Apply a partial edit. None fields are untouched, blank titles ignored."""
        _check_task_id(task_id)
        async with self._uow.transaction():
            task = await self._get_task_or_raise(task_id)
            task.set_title(patch.title).set_description(patch.description)
            task = await self._uow.tasks.persist(task)
        logger.info("Task updated", extra={"task_id": task_id})
        return task

    async def complete_task(self, task_id: TaskId) -> TaskResult:
        return await self._transition(task_id, TaskState.COMPLETE)

    async def reopen_task(self, task_id: TaskId) -> TaskResult:
        return await self._transition(task_id, TaskState.OPEN)

    async def save_rankings(
        self, owner_id: OwnerId, ordered_ids: Sequence[int],
    ) -> RankingLike:
        """Replace the owner's stored order with `ordered_ids`.

        Creates the ranking record on first save.

        Raises:
            InvalidArgumentError: an id is not an integer (before any IO).
            OwnerNotFoundError: no record yet and the owner does not exist.
        """
        ids = _check_task_ids(ordered_ids)
        async with self._uow.transaction():
            ranking, owned = await asyncio.gather(
                self._load_or_create_ranking(owner_id),
                self._uow.tasks.find_by_owner_and_states(
                    owner_id, frozenset(TaskState),
                ),
            )
            owned_ids = {t.id for t in owned}
            ranking.ranked_task_ids = [i for i in ids if i in owned_ids]
            ranking = await self._uow.rankings.persist(ranking)
        dropped = len(ids) - len(ranking.ranked_task_ids)
        if dropped:
            logger.warning(
                f"Dropped {dropped} id(s) not owned by the caller",
                extra={"owner_id": str(owner_id)},
            )
        logger.info(
            "Rankings saved",
            extra={
                "owner_id": str(owner_id),
                "ranked_count": len(ranking.ranked_task_ids),
            },
        )
        return ranking

    # ─── Helpers ─────────────────────────────────────────────────

    async def _transition(self, task_id: TaskId, target: TaskState) -> TaskResult:
        _check_task_id(task_id)
        async with self._uow.transaction():
            task = await self._get_task_or_raise(task_id)
            if task.state == target:
                logger.debug(
                    f"Task already {target.value}", extra={"task_id": task_id},
                )
                return NotModified(task)
            if target == TaskState.COMPLETE:
                task.complete()
            else:
                task.reopen()
            task = await self._uow.tasks.persist(task)
        logger.info(f"Task {target.value}", extra={"task_id": task_id})
        return Updated(task)

    async def _get_task_or_raise(self, task_id: TaskId) -> TaskLike:
        task = await self._uow.tasks.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def _require_owner(self, owner_id: OwnerId) -> None:
        if not await self._uow.owners.exists(owner_id):
            raise OwnerNotFoundError(owner_id)

    async def _load_ranked_ids(self, owner_id: OwnerId) -> list[int]:
        """Read path: a missing record reads as an empty ranking."""
        ranking = await self._uow.rankings.find_by_owner(owner_id)
        if ranking is None:
            return []
        return list(ranking.ranked_task_ids or [])

    async def _load_or_create_ranking(self, owner_id: OwnerId) -> RankingLike:
        """Write path: a missing record is created for an existing owner."""
        ranking = await self._uow.rankings.find_by_owner(owner_id)
        if ranking is not None:
            return ranking
        await self._require_owner(owner_id)
        logger.info(
            "Creating ranking record", extra={"owner_id": str(owner_id)},
        )
        return self._uow.rankings.new_for_owner(owner_id)


def _check_task_id(task_id: TaskId, field: str = "task_id") -> None:
    if isinstance(task_id, bool) or not isinstance(task_id, int):
        raise InvalidArgumentError(f"{task_id!r} is not a valid task id", field)


def _check_task_ids(ordered_ids: Sequence[int]) -> list[int]:
    if isinstance(ordered_ids, (str, bytes)):
        raise InvalidArgumentError("rankings must be a list of task ids", "rankings")
    ids = list(ordered_ids)
    for task_id in ids:
        _check_task_id(task_id, "rankings")
    return ids
