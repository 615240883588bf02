"""Derived values consumed by reporting: predicted task ends, slip and cascade risk."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sprintly.models import Status, Task

from .core import PredictionMap
from .workdays import round_half_up


@dataclass(frozen=True)
class VelocityStats:
    """Historical slip for one person."""

    avg_slip: int  # Mean slip in days, rounded half up
    count: int  # Number of tasks contributing


def task_predicted_end(task_id: int, predictions: PredictionMap) -> date | None:
    """Latest predicted end across the task's lanes, or None if no lane is scheduled."""
    ends = [p.end for p in predictions.get(task_id, {}).values() if p.end is not None]
    return max(ends) if ends else None


def slip_days(task: Task) -> int | None:
    """Days between the frozen planned end and the actual end (positive = late)."""
    if task.planned_end is None or task.actual_end is None:
        return None
    return (task.actual_end - task.planned_end).days


def compute_velocity(tasks: list[Task]) -> dict[str, VelocityStats]:
    """Average slip per person over tasks with both a planned and an actual end.

    Each task's full slip counts once for every person owning any of its
    lanes. People without contributing tasks are absent from the result.
    """
    slips: dict[str, list[int]] = {}
    for task in tasks:
        slip = slip_days(task)
        if slip is None:
            continue
        for person in task.owning_people():
            slips.setdefault(person, []).append(slip)

    return {
        person: VelocityStats(avg_slip=round_half_up(sum(values) / len(values)), count=len(values))
        for person, values in slips.items()
    }


def cascade_risks(
    tasks: list[Task], predictions: PredictionMap, sprint_end: date | None
) -> list[Task]:
    """Open tasks predicted to end after the sprint because a dependency does too.

    Released and Descoped tasks are never at risk. Without a sprint end
    nothing can overrun, so the result is empty.
    """
    if sprint_end is None:
        return []
    limit = sprint_end

    def ends_late(task_id: int) -> bool:
        end = task_predicted_end(task_id, predictions)
        return end is not None and end > limit

    return [
        task
        for task in tasks
        if task.depends_on
        and task.status not in (Status.RELEASED, Status.DESCOPED)
        and ends_late(task.id)
        and any(ends_late(dep_id) for dep_id in task.depends_on)
    ]
