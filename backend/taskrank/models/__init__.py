"""ORM Models: SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Owner is the aggregate root; tasks and the ranking record are scoped by owner_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from taskrank.models.owner import Owner  # noqa: F401
from taskrank.models.task import Task  # noqa: F401
from taskrank.models.task_ranking import TaskRanking  # noqa: F401
