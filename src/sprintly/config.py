"""Sprint configuration: window, holidays, calendar events and logged delays."""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .logger import get_logger
from .models import ALL_LANES, LANE_KEYS, blank_to_none

logger = get_logger()


class EventType(str, Enum):
    """Kinds of personal calendar events."""

    L2 = "l2"  # Rotational support duty, no dev capacity that day
    PLANNED = "planned"  # Planned leave
    UNPLANNED = "unplanned"  # Unplanned leave (sick etc.)


LEAVE_TYPES = frozenset({EventType.PLANNED, EventType.UNPLANNED})


class CalendarEvent(BaseModel):
    """A single day on which one person is unavailable."""

    person: str
    date: datetime.date
    type: EventType
    reason: str | None = None


class TaskDelay(BaseModel):
    """Extra effort logged against a task lane (or all lanes) after planning."""

    task_id: int
    lane: str = ALL_LANES
    effort_delta: float
    reason: str = ""
    date: datetime.date | None = None  # When the delay was logged

    @field_validator("lane", mode="before")
    @classmethod
    def default_lane(cls, v: Any) -> Any:
        """Blank lane means the whole task."""
        return v or ALL_LANES

    @field_validator("lane")
    @classmethod
    def validate_lane(cls, v: str) -> str:
        if v != ALL_LANES and v not in LANE_KEYS:
            raise ValueError(f"Unknown lane '{v}', expected one of {', '.join(LANE_KEYS)} or 'all'")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def parse_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    def applies_to(self, task_id: int, lane: str) -> bool:
        """Whether this delay adjusts the given task lane."""
        return self.task_id == task_id and self.lane in (ALL_LANES, lane)


class SprintConfig(BaseModel):
    """Inputs to the prediction engine besides the task list.

    ``sprint_start`` is a precondition: the engine does not defend against a
    missing or invalid value.
    """

    sprint_start: datetime.date
    sprint_end: datetime.date | None = None
    holidays: set[datetime.date] = Field(default_factory=set)
    calendar_events: list[CalendarEvent] = Field(default_factory=list)
    task_delays: list[TaskDelay] = Field(default_factory=list)

    @field_validator("sprint_end", mode="before")
    @classmethod
    def parse_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("holidays", mode="before")
    @classmethod
    def ensure_holidays(cls, v: Any) -> Any:
        if v is None:
            return set()
        return v

    @model_validator(mode="after")
    def validate_window(self) -> SprintConfig:
        """Ensure the sprint does not end before it starts."""
        if self.sprint_end is not None and self.sprint_end < self.sprint_start:
            raise ValueError("sprint_end must not be before sprint_start")
        return self

    def with_events(self, events: list[CalendarEvent]) -> SprintConfig:
        """Return a copy with ``events`` added, skipping exact duplicates."""
        seen = {(e.person, e.date, e.type) for e in self.calendar_events}
        merged = list(self.calendar_events)
        for event in events:
            key = (event.person, event.date, event.type)
            if key in seen:
                logger.checks(
                    f"Skipping duplicate {event.type.value} event: {event.person} {event.date}"
                )
                continue
            seen.add(key)
            merged.append(event)
        return self.model_copy(update={"calendar_events": merged})
