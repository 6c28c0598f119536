"""SQL Repositories: SQLAlchemy implementations of the core repository protocols.

Invariants:
    - All repositories of one SqlUnitOfWork share one AsyncSession and one lock
    - Statements on the shared session are serialized by the lock, so the service
      may asyncio.gather() reads safely
    - persist() flushes but never commits; SqlUnitOfWork.transaction() commits once
    - Task queries are always ordered by ascending id (creation order)

Design Decisions:
    - asyncio.Lock over one session per query: a single transaction must span all
      reads and the write of an operation
    - transaction() rolls back on BaseException so a cancelled request leaves no
      partial write behind
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskrank.core.domain_types import OwnerId, TaskId, TaskState
from taskrank.models.owner import Owner
from taskrank.models.task import Task
from taskrank.models.task_ranking import TaskRanking

logger = logging.getLogger(__name__)


class SqlTaskRepository:
    """Task persistence scoped to one session."""

    def __init__(self, db: AsyncSession, lock: asyncio.Lock):
        self._db = db
        self._lock = lock

    async def find_by_owner_and_states(
        self, owner_id: OwnerId, states: frozenset[TaskState],
    ) -> Sequence[Task]:
        query = (
            select(Task)
            .where(Task.owner_id == owner_id, Task.state.in_(list(states)))
            .order_by(Task.id)
        )
        async with self._lock:
            result = await self._db.execute(query)
            return list(result.scalars().all())

    async def find_by_id(self, task_id: TaskId) -> Task | None:
        async with self._lock:
            return await self._db.get(Task, task_id)

    async def persist(self, task: Task) -> Task:
        async with self._lock:
            self._db.add(task)
            await self._db.flush()
        return task

    def new_task(self, title: str, owner_id: OwnerId) -> Task:
        return Task(title=title, owner_id=owner_id, state=TaskState.OPEN)


class SqlRankRepository:
    """Ranking-record persistence scoped to one session."""

    def __init__(self, db: AsyncSession, lock: asyncio.Lock):
        self._db = db
        self._lock = lock

    async def find_by_owner(self, owner_id: OwnerId) -> TaskRanking | None:
        query = select(TaskRanking).where(TaskRanking.owner_id == owner_id)
        async with self._lock:
            result = await self._db.execute(query)
            return result.scalar_one_or_none()

    async def persist(self, ranking: TaskRanking) -> TaskRanking:
        async with self._lock:
            self._db.add(ranking)
            await self._db.flush()
        return ranking

    def new_for_owner(self, owner_id: OwnerId) -> TaskRanking:
        return TaskRanking(owner_id=owner_id, ranked_task_ids=[])


class SqlOwnerDirectory:
    """Resolves owner references against the owners table."""

    def __init__(self, db: AsyncSession, lock: asyncio.Lock):
        self._db = db
        self._lock = lock

    async def exists(self, owner_id: OwnerId) -> bool:
        query = select(Owner.id).where(Owner.id == owner_id)
        async with self._lock:
            result = await self._db.execute(query)
            return result.scalar_one_or_none() is not None


class SqlUnitOfWork:
    """Repositories bound to one AsyncSession, committed as one transaction."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self._lock = asyncio.Lock()
        self.tasks = SqlTaskRepository(db, self._lock)
        self.rankings = SqlRankRepository(db, self._lock)
        self.owners = SqlOwnerDirectory(db, self._lock)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[None, None]:
        """Commit on success, roll back on any exception (including cancellation)."""
        try:
            yield
            async with self._lock:
                await self._db.commit()
        except BaseException:
            async with self._lock:
                await self._db.rollback()
            logger.debug("Transaction rolled back")
            raise
