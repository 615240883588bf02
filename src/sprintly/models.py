"""Task data models for Sprintly."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

# Disciplines a task is split into. Each lane is owned and estimated separately.
LANE_KEYS: tuple[str, ...] = ("ios", "and", "be", "wc", "qa")

# Delay lane value that applies to every lane of a task
ALL_LANES = "all"


class Priority(str, Enum):
    """Task priority."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"

    @property
    def rank(self) -> int:
        """Sort rank (lower schedules first)."""
        return PRIORITY_RANK[self]


PRIORITY_RANK: dict[Priority, int] = {Priority.P1: 0, Priority.P2: 1, Priority.P3: 2}


class Status(str, Enum):
    """Task workflow status."""

    PLANNED = "Planned"
    TODO = "To Do"
    IN_DEV = "In Dev"
    IN_QA = "In QA"
    RELEASED = "Released"
    BLOCKED = "Blocked"
    DESCOPED = "Descoped"


# Statuses whose recorded actual end is taken as ground truth
FINISHED_STATUSES = frozenset({Status.RELEASED, Status.IN_QA})


def blank_to_none(value: Any) -> Any:
    """Treat empty strings as unset dates."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class LaneDates(BaseModel):
    """Per-lane overrides of the task-level dates."""

    planned_start: date | None = None
    actual_start: date | None = None
    actual_end: date | None = None

    @field_validator("planned_start", "actual_start", "actual_end", mode="before")
    @classmethod
    def parse_blank(cls, v: Any) -> Any:
        return blank_to_none(v)


class Task(BaseModel):
    """The unit of work: one feature, split into per-discipline lanes."""

    id: int
    name: str
    priority: Priority = Priority.P2
    status: Status = Status.TODO
    depends_on: list[int] = Field(default_factory=list)
    owners: dict[str, str] = Field(default_factory=dict)
    effort: dict[str, float] = Field(default_factory=dict)
    lane_starts: dict[str, LaneDates] = Field(default_factory=dict)
    planned_start: date | None = None
    actual_start: date | None = None
    actual_end: date | None = None
    # Frozen by the host on the first successful prediction; baseline for slip
    planned_end: date | None = None
    notes: str = ""

    @field_validator(
        "planned_start", "actual_start", "actual_end", "planned_end", mode="before"
    )
    @classmethod
    def parse_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("owners", mode="before")
    @classmethod
    def normalize_owners(cls, v: Any) -> Any:
        """Map null owners to the empty string."""
        if isinstance(v, dict):
            return {lane: owner or "" for lane, owner in v.items()}  # type: ignore[misc]
        return v

    @field_validator("effort", mode="before")
    @classmethod
    def normalize_effort(cls, v: Any) -> Any:
        """Map null or blank efforts to zero."""
        if isinstance(v, dict):
            return {lane: blank_to_none(e) or 0 for lane, e in v.items()}  # type: ignore[misc]
        return v

    @model_validator(mode="after")
    def validate_no_self_dependency(self) -> Task:
        """A task may not depend on itself."""
        if self.id in self.depends_on:
            raise ValueError(f"Task {self.id} cannot depend on itself")
        return self

    def owner(self, lane: str) -> str | None:
        """Owner of a lane, or None if unowned."""
        return self.owners.get(lane) or None

    def lane_effort(self, lane: str) -> float:
        """Base effort estimate for a lane in days."""
        return float(self.effort.get(lane, 0) or 0)

    def lane_dates(self, lane: str) -> LaneDates:
        """Lane-specific date overrides (empty if none)."""
        return self.lane_starts.get(lane) or LaneDates()

    def owning_people(self) -> list[str]:
        """Distinct non-empty owners across lanes, in lane order."""
        people: list[str] = []
        for owner in self.owners.values():
            if owner and owner not in people:
                people.append(owner)
        return people

    def has_effort(self) -> bool:
        return any(self.lane_effort(lane) > 0 for lane in self.effort)
