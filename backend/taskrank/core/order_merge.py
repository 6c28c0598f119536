"""Order Merge: combine a stored manual ranking with the live task list.

Invariants:
    - Pure: no IO, no mutation of inputs
    - Every task in `tasks` appears exactly once in the result
    - Empty ranking -> result equals `tasks` order
    - Ranking covering `tasks` exactly -> result equals ranking order
    - Dangling ids (not in `tasks`) are skipped; repeated ids count once

Design Decisions:
    - Works on anything with an `id` attribute (RankableTask): the ORM model and
      test doubles both satisfy it, so tests need no database
    - Unranked tasks keep the base (creation) order and go last
"""

from typing import Hashable, Iterable, Protocol, Sequence, TypeVar


class RankableTask(Protocol):
    """Anything identified by an `id` can be ranked."""
    id: Hashable


T = TypeVar("T", bound=RankableTask)


def merge_order(tasks: Sequence[T], ranked_ids: Iterable[Hashable]) -> list[T]:
    """Order `tasks` by `ranked_ids`, then append the unranked rest."""
    by_id = {task.id: task for task in tasks}
    emitted: set[Hashable] = set()
    ordered: list[T] = []

    for task_id in ranked_ids:
        task = by_id.get(task_id)
        if task is None or task_id in emitted:
            continue
        emitted.add(task_id)
        ordered.append(task)

    ordered.extend(t for t in tasks if t.id not in emitted)
    return ordered
