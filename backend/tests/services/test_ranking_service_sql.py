"""Ranking Service against SQLite: repositories, ordering and transactions.

Tests cover:
    - The four-task rerank scenario end to end through SqlUnitOfWork
    - Ranking row created lazily and replaced in place (one row per owner)
    - Concurrent gather() reads on one AsyncSession
    - Failed writes and failed commits roll back (no partial state)
    - Malformed task ids rejected before touching storage
    - Ids assigned in creation order
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from taskrank.core.domain_types import NotModified, TaskPatch, TaskState, Updated
from taskrank.core.errors import (
    InvalidArgumentError, OwnerNotFoundError, TaskNotFoundError,
)
from taskrank.infrastructure.repositories import SqlUnitOfWork
from taskrank.models.owner import Owner
from taskrank.models.task_ranking import TaskRanking


def _titles(tasks) -> list[str]:
    return [t.title for t in tasks]


async def _ranking_rows(db) -> int:
    result = await db.execute(select(func.count()).select_from(TaskRanking))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_rerank_scenario(sql_service, seed_owner):
    ids = [
        (await sql_service.create_task(title, seed_owner.id)).id
        for title in ("a", "b", "c", "d")
    ]
    assert ids == sorted(ids)
    t1, t2, t3, t4 = ids

    await sql_service.save_rankings(seed_owner.id, [t3, t1, t2, t4])
    assert _titles(await sql_service.query_by_owner(seed_owner.id)) == [
        "c", "a", "b", "d",
    ]

    await sql_service.save_rankings(seed_owner.id, [t4, t1, t2, t3])
    assert _titles(await sql_service.query_by_owner(seed_owner.id)) == [
        "d", "a", "b", "c",
    ]


@pytest.mark.asyncio
async def test_one_ranking_row_per_owner(sql_service, seed_owner, test_db):
    a = await sql_service.create_task("a", seed_owner.id)
    b = await sql_service.create_task("b", seed_owner.id)
    assert await _ranking_rows(test_db) == 0

    await sql_service.query_by_owner(seed_owner.id)
    assert await _ranking_rows(test_db) == 0

    await sql_service.save_rankings(seed_owner.id, [b.id, a.id])
    await sql_service.save_rankings(seed_owner.id, [a.id, b.id])

    assert await _ranking_rows(test_db) == 1
    result = await test_db.execute(select(TaskRanking))
    assert result.scalar_one().ranked_task_ids == [a.id, b.id]


@pytest.mark.asyncio
async def test_owner_without_tasks_gets_empty_list(sql_service, seed_owner, test_db):
    assert await sql_service.query_by_owner(seed_owner.id) == []
    assert await _ranking_rows(test_db) == 0


@pytest.mark.asyncio
async def test_save_for_unknown_owner_writes_nothing(sql_service, test_db):
    with pytest.raises(OwnerNotFoundError):
        await sql_service.save_rankings(uuid4(), [1])
    assert await _ranking_rows(test_db) == 0


@pytest.mark.asyncio
async def test_states_filter_and_completion(sql_service, seed_owner):
    tasks = [
        await sql_service.create_task(f"task-{i}", seed_owner.id)
        for i in range(1, 5)
    ]
    first = await sql_service.complete_task(tasks[1].id)
    again = await sql_service.complete_task(tasks[1].id)
    await sql_service.complete_task(tasks[3].id)

    assert isinstance(first, Updated)
    assert isinstance(again, NotModified)
    assert again.task.state == TaskState.COMPLETE
    assert _titles(await sql_service.query_by_owner(seed_owner.id)) == [
        "task-1", "task-3",
    ]
    assert _titles(
        await sql_service.query_by_owner(seed_owner.id, ["complete"]),
    ) == ["task-2", "task-4"]
    assert _titles(
        await sql_service.query_by_owner(seed_owner.id, ["open", "complete"]),
    ) == ["task-1", "task-2", "task-3", "task-4"]


@pytest.mark.asyncio
async def test_update_persists_clear_and_keeps_title(sql_service, seed_owner, test_db):
    task_id = (await sql_service.create_task("original", seed_owner.id)).id
    await sql_service.update(task_id, TaskPatch(description="details"))
    await sql_service.update(task_id, TaskPatch(description=""))

    test_db.expire_all()
    fresh = await sql_service.get_task(task_id)
    assert fresh.description == ""
    assert fresh.title == "original"


@pytest.mark.asyncio
async def test_failed_write_rolls_back(sql_service, sql_uow, seed_owner, test_db, monkeypatch):
    task_id = (await sql_service.create_task("keep", seed_owner.id)).id

    async def flush_then_fail(_task):
        await test_db.flush()
        raise RuntimeError("storage went away")

    monkeypatch.setattr(sql_uow.tasks, "persist", flush_then_fail)
    with pytest.raises(RuntimeError):
        await sql_service.update(task_id, TaskPatch(title="changed"))
    monkeypatch.undo()

    fresh = await sql_service.get_task(task_id)
    assert fresh.title == "keep"


@pytest.mark.asyncio
async def test_rankings_scoped_to_owner(sql_service, seed_owner, test_db):
    other = Owner(name="other owner")
    test_db.add(other)
    await test_db.commit()

    mine = await sql_service.create_task("mine", seed_owner.id)
    theirs = await sql_service.create_task("theirs", other.id)

    ranking = await sql_service.save_rankings(seed_owner.id, [theirs.id, mine.id])

    assert ranking.ranked_task_ids == [mine.id]
    assert _titles(await sql_service.query_by_owner(other.id)) == ["theirs"]


@pytest.mark.asyncio
async def test_missing_task_raises_not_found(sql_service):
    with pytest.raises(TaskNotFoundError):
        await sql_service.complete_task(999)


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", [True, "1", 1.0, None])
async def test_malformed_task_id_leaves_task_untouched(sql_service, seed_owner, bad_id):
    task_id = (await sql_service.create_task("keep", seed_owner.id)).id
    assert task_id == 1

    with pytest.raises(InvalidArgumentError):
        await sql_service.complete_task(bad_id)
    with pytest.raises(InvalidArgumentError):
        await sql_service.update(bad_id, TaskPatch(title="changed"))

    fresh = await sql_service.get_task(task_id)
    assert fresh.title == "keep"
    assert fresh.state == TaskState.OPEN


class _CommitFailsSession:
    def __init__(self):
        self.rollbacks = 0

    async def commit(self):
        raise RuntimeError("connection dropped during commit")

    async def rollback(self):
        self.rollbacks += 1


@pytest.mark.asyncio
async def test_failed_commit_rolls_back():
    session = _CommitFailsSession()
    uow = SqlUnitOfWork(session)

    with pytest.raises(RuntimeError):
        async with uow.transaction():
            pass

    assert session.rollbacks == 1
