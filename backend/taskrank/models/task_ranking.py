"""TaskRanking ORM: an owner's manual sort order, stored as a list of task ids.

Invariants:
    - At most one row per owner (unique owner_id)
    - ranked_task_ids is replaced wholesale on save, never patched
    - May hold dangling ids (tasks since filtered out) and omit new tasks

Design Decisions:
    - JSON list column over a join table: the list is always read and written
      as a whole, order is the payload
    - Row created lazily on the first save, never on read
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskrank.db.base import Base


class TaskRanking(Base):
    """Persisted manual ranking of an owner's tasks."""
    __tablename__ = "task_ranks"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("owners.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    ranked_task_ids: Mapped[list[int]] = mapped_column(
        JSON, nullable=False, default=list,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
