"""Domain Types: task state, edit patches and operation results.

Invariants:
    - TaskId wraps int, OwnerId wraps UUID; domain logic never passes bare primitives
    - TaskState is closed: parse() fails on unknown tokens, never guesses
    - TaskResult is either Updated or NotModified; both are successes

Design Decisions:
    - str Enum for TaskState: value is what the DB column and JSON carry
    - Enum over boolean "done" flag: room for an archived/deleted state later
      without a schema break (ADR: state extensibility)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, NewType
from uuid import UUID

from taskrank.core.errors import InvalidArgumentError


# ─── Identity Types ──────────────────────────────────────────────

TaskId = NewType("TaskId", int)
OwnerId = NewType("OwnerId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class TaskState(str, Enum):
    """Lifecycle states of a Task. Maps to the `state` column."""
    OPEN = "open"
    COMPLETE = "complete"

    @classmethod
    def parse(cls, token: str) -> "TaskState":
        """Parse a state token case-insensitively ("OpEn" -> OPEN).

        Raises:
            InvalidArgumentError: token is not a known state.
        """
        if isinstance(token, cls):
            return token
        if not isinstance(token, str):
            raise InvalidArgumentError(f"{token!r} is not a valid state", "state")
        try:
            return cls(token.strip().lower())
        except ValueError:
            raise InvalidArgumentError(
                f"{token} is not a valid state", "state",
            ) from None


DEFAULT_STATES: frozenset[TaskState] = frozenset({TaskState.OPEN})


def parse_states(tokens: Iterable[str] | None) -> frozenset[TaskState]:
    """Parse every token, falling back to DEFAULT_STATES when none are given."""
    if not tokens:
        return DEFAULT_STATES
    return frozenset(TaskState.parse(t) for t in tokens)


# ─── Edits ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class TaskPatch:
    """Partial edit of a Task. None means "leave untouched".

    An empty-string description is a real value (it clears the field).
    A blank title is ignored by the Task itself.
    """
    title: str | None = None
    description: str | None = None


# ─── Results ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Updated:
    """The task changed and was persisted."""
    task: Any

    @property
    def modified(self) -> bool:
        return True


@dataclass(frozen=True)
class NotModified:
    """The task was already in the requested state; nothing was written."""
    task: Any

    @property
    def modified(self) -> bool:
        return False


TaskResult = Updated | NotModified
