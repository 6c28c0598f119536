"""Task ORM: a single to-do item held by one owner.

Invariants:
    - id is an auto-incremented integer: ascending id == creation order
    - Always belongs to an Owner (owner_id FK), never reassigned
    - state starts as OPEN; never physically deleted by the service
    - title is never replaced by a blank value
    - description None is "never set"; "" is an explicit clear

Design Decisions:
    - Non-native Enum column storing TaskState values ("open", "complete"):
      adding a state is a code change, not a DB type migration
    - Mutators return self so service code can chain and persist in one expression
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskrank.core.domain_types import TaskState
from taskrank.db.base import Base

TITLE_MAX_LENGTH = 128
DESCRIPTION_MAX_LENGTH = 2048


class Task(Base):
    """Task entity, mutated in place by its owner's service calls."""
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("owners.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH), nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=True,
    )
    state: Mapped[TaskState] = mapped_column(
        Enum(
            TaskState, name="task_state", native_enum=False, length=20,
            values_callable=lambda states: [s.value for s in states],
        ),
        nullable=False,
        default=TaskState.OPEN,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def complete(self) -> "Task":
        self.state = TaskState.COMPLETE
        return self

    def reopen(self) -> "Task":
        self.state = TaskState.OPEN
        return self

    def set_title(self, new_title: str | None) -> "Task":
        """Set the title unless `new_title` is None or blank after trim."""
        if new_title is not None and new_title.strip():
            self.title = new_title
        return self

    def set_description(self, new_description: str | None) -> "Task":
        """Set the description unless None. "" clears it."""
        if new_description is not None:
            self.description = new_description
        return self
