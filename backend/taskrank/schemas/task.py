"""Task Schemas: Pydantic models with field-level validation for the tasks API.

Invariants:
    - TaskCreate.title: 1-128 chars, stripped, non-empty
    - TaskUpdate fields are optional; null and absent both mean "leave untouched"
    - RerankRequest.rankings holds integers only (strict: no "3" or true)

Design Decisions:
    - Blank TaskUpdate.title is accepted here and ignored by the Task, matching
      the service contract; only creation rejects blank titles
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from taskrank.core.domain_types import TaskPatch, TaskState
from taskrank.models.task import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH


class TaskCreate(BaseModel):
    """Task creation: validates title length and whitespace."""
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class TaskUpdate(BaseModel):
    """Partial task edit."""
    title: str | None = Field(None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)

    def to_patch(self) -> TaskPatch:
        return TaskPatch(title=self.title, description=self.description)


class TaskResponse(BaseModel):
    """Task response: public-facing task data."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: UUID
    title: str
    description: str | None = None
    state: TaskState
    created_at: datetime | None = None


class RerankRequest(BaseModel):
    """Full replacement of the caller's manual order."""
    rankings: list[StrictInt]


class RankingResponse(BaseModel):
    """Persisted ranking record."""
    model_config = ConfigDict(from_attributes=True)

    owner_id: UUID
    ranked_task_ids: list[int]
