"""Pytest configuration and fixtures for sprintly tests."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from sprintly import context
from sprintly.config import CalendarEvent, EventType, SprintConfig, TaskDelay
from sprintly.logger import reset_logger
from sprintly.models import Task
from sprintly.scheduler import PredictionMap

# A Monday
SPRINT_START = date(2026, 2, 23)
SPRINT_END = date(2026, 3, 31)


@pytest.fixture(autouse=True)
def clean_state() -> None:
    """Reset logger configuration and global context before each test for isolation."""
    reset_logger()
    context.set_config_path(None)


def make_task(task_id: int, **kwargs: Any) -> Task:
    """Create a Task with sensible defaults.

    Single-lane shorthand: ``make_task(1, owner="Sam", effort=2)`` puts the
    work in the ``and`` lane (override with ``lane=``).

    Example:
        make_task(2, owner="Sam", effort=3, depends_on=[1])
    """
    lane = kwargs.pop("lane", "and")
    if "owner" in kwargs or ("effort" in kwargs and not isinstance(kwargs["effort"], dict)):
        owner = kwargs.pop("owner", "")
        effort = kwargs.pop("effort", 0)
        kwargs["owners"] = {lane: owner}
        kwargs["effort"] = {lane: effort}
    kwargs.setdefault("name", f"Task {task_id}")
    return Task(id=task_id, **kwargs)


def make_config(
    *,
    holidays: list[date] | None = None,
    events: list[tuple[str, date, str]] | None = None,
    delays: list[TaskDelay] | None = None,
    sprint_start: date = SPRINT_START,
    sprint_end: date | None = SPRINT_END,
) -> SprintConfig:
    """Create a SprintConfig; ``events`` are (person, date, type) tuples."""
    return SprintConfig(
        sprint_start=sprint_start,
        sprint_end=sprint_end,
        holidays=set(holidays or []),
        calendar_events=[
            CalendarEvent(person=person, date=day, type=EventType(kind))
            for person, day, kind in events or []
        ],
        task_delays=delays or [],
    )


def interval(predictions: PredictionMap, task_id: int, lane: str = "and") -> tuple[Any, Any]:
    """(start, end) of one lane."""
    prediction = predictions[task_id][lane]
    return prediction.start, prediction.end
