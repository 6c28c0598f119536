"""Boundary Protocols: contracts between the ranking core and storage.

Invariants:
    - Core NEVER imports from infrastructure; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by the shell via dependency injection
    - Every repository call of one service operation runs inside one
      UnitOfWork.transaction()

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; merge_order that consumes their
      results stays synchronous
    - new_task / new_for_owner construct unsaved objects so the service never
      imports ORM classes
"""

from typing import AsyncContextManager, Protocol, Sequence
from uuid import UUID

from taskrank.core.domain_types import OwnerId, TaskId, TaskState


class TaskLike(Protocol):
    """Structural contract for Task objects handled by the service."""
    id: int
    owner_id: UUID
    title: str
    description: str | None
    state: TaskState

    def set_title(self, new_title: str | None) -> "TaskLike": ...
    def set_description(self, new_description: str | None) -> "TaskLike": ...
    def complete(self) -> "TaskLike": ...
    def reopen(self) -> "TaskLike": ...


class RankingLike(Protocol):
    """Structural contract for a per-owner ranking record."""
    owner_id: UUID
    ranked_task_ids: list[int]


class TaskRepository(Protocol):
    """Contract for task persistence."""
    async def find_by_owner_and_states(
        self, owner_id: OwnerId, states: frozenset[TaskState],
    ) -> Sequence[TaskLike]: ...
    async def find_by_id(self, task_id: TaskId) -> TaskLike | None: ...
    async def persist(self, task: TaskLike) -> TaskLike: ...
    def new_task(self, title: str, owner_id: OwnerId) -> TaskLike: ...


class RankRepository(Protocol):
    """Contract for ranking-record persistence (at most one per owner)."""
    async def find_by_owner(self, owner_id: OwnerId) -> RankingLike | None: ...
    async def persist(self, ranking: RankingLike) -> RankingLike: ...
    def new_for_owner(self, owner_id: OwnerId) -> RankingLike: ...


class OwnerDirectory(Protocol):
    """Contract for resolving owner references."""
    async def exists(self, owner_id: OwnerId) -> bool: ...


class UnitOfWork(Protocol):
    """Repositories sharing one transaction."""
    tasks: TaskRepository
    rankings: RankRepository
    owners: OwnerDirectory

    def transaction(self) -> AsyncContextManager[None]: ...
