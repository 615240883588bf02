"""Prediction engine: projected start/end dates for every lane of every task.

The engine is a pure function of ``(tasks, config)``. Each call builds its own
person pointers and prediction map, never mutates its inputs, and never raises
on a malformed dependency graph.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TypeVar

from sprintly.config import SprintConfig
from sprintly.logger import changes_enabled, checks_enabled, debug_enabled, get_logger
from sprintly.models import FINISHED_STATUSES, LANE_KEYS, Status, Task

from .calendar import blocked_set
from .core import UNSCHEDULED, LanePrediction, PredictionMap
from .dependencies import topological_order
from .workdays import advance_workdays, next_working_day_on_or_after, round_to_half

logger = get_logger()

T = TypeVar("T")

# Anchor groups, in scheduling order
ANCHOR_ACTUAL = 0  # Already in flight
ANCHOR_PLANNED = 1  # Committed future slot
ANCHOR_FLOATING = 2  # Queued behind the owner's earlier work


def resolve_effective(
    lane_value: T | None, task_value: T | None, default: T | None = None
) -> T | None:
    """Lane override wins over the task-level value, which wins over the default."""
    if lane_value is not None:
        return lane_value
    if task_value is not None:
        return task_value
    return default


def scheduling_key(task: Task) -> tuple[int, date, int, int]:
    """Tie-break key for the scheduling order.

    In-flight tasks come first, then tasks with a planned start (earlier anchor
    first within each group), then floating tasks by priority.
    """
    priority_rank = task.priority.rank
    if task.actual_start is not None:
        return (ANCHOR_ACTUAL, task.actual_start, priority_rank, task.id)
    if task.planned_start is not None:
        return (ANCHOR_PLANNED, task.planned_start, priority_rank, task.id)
    return (ANCHOR_FLOATING, date.min, priority_rank, task.id)


def effective_effort(task: Task, lane: str, config: SprintConfig) -> float:
    """Lane effort plus every delay logged against it, rounded to 0.5 days."""
    delay_days = sum(
        delay.effort_delta for delay in config.task_delays if delay.applies_to(task.id, lane)
    )
    return round_to_half(task.lane_effort(lane) + delay_days)


def _dependency_end(task: Task, predictions: PredictionMap) -> date | None:
    """Latest predicted end across all lanes of all already-scheduled dependencies."""
    latest: date | None = None
    for dep_id in task.depends_on:
        for prediction in predictions.get(dep_id, {}).values():
            if prediction.end is not None and (latest is None or prediction.end > latest):
                latest = prediction.end
    return latest


def _schedule_lane(
    task: Task,
    lane: str,
    config: SprintConfig,
    person_pointer: dict[str, date],
    predictions: PredictionMap,
) -> LanePrediction:
    owner = task.owner(lane)
    effort = effective_effort(task, lane, config)
    if owner is None or effort == 0:
        return UNSCHEDULED

    blocked = blocked_set(owner, config)
    overrides = task.lane_dates(lane)

    actual_start = resolve_effective(overrides.actual_start, task.actual_start)
    planned_start = resolve_effective(overrides.planned_start, task.planned_start)
    if actual_start is not None:
        earliest = actual_start
        anchor = "actual start"
    elif planned_start is not None:
        earliest = planned_start
        anchor = "planned start"
    else:
        earliest = config.sprint_start
        anchor = "sprint start"
        pointer = person_pointer.get(owner)
        if pointer is not None and pointer >= earliest:
            earliest = pointer + timedelta(days=1)
            anchor = f"{owner}'s queue"

    dependency_end = _dependency_end(task, predictions)
    if dependency_end is not None and dependency_end > earliest:
        earliest = dependency_end
        anchor = "dependencies"

    start = next_working_day_on_or_after(earliest, blocked)

    actual_end = resolve_effective(overrides.actual_end, task.actual_end)
    if actual_end is not None and task.status in FINISHED_STATUSES:
        end = actual_end
        if checks_enabled():
            logger.checks(f"  [{task.id}/{lane}] {owner}: finished, actual end {end}")
    else:
        end = advance_workdays(start, effort - 1, blocked)
        if checks_enabled():
            logger.checks(
                f"  [{task.id}/{lane}] {owner}: {effort}d anchored on {anchor} "
                f"-> {start} .. {end}"
            )

    current = person_pointer.get(owner)
    if current is None or end > current:
        person_pointer[owner] = end

    return LanePrediction(start=start, end=end)


def compute_predictions(tasks: list[Task], config: SprintConfig) -> PredictionMap:
    """Project a start/end date for every lane of every task.

    Tasks are processed in dependency order, ties broken by ``scheduling_key``.
    Each person works one lane at a time: a floating lane starts after
    everything already scheduled for its owner, while actual and planned
    starts anchor a lane on their own date. Every lane waits for all lanes of
    its dependencies. Descoped tasks get no entry at all.

    Args:
        tasks: Tasks to schedule (not modified)
        config: Sprint window, calendars and logged delays (not modified)

    Returns:
        A fresh map of task id -> lane -> LanePrediction
    """
    predictions: PredictionMap = {}
    person_pointer: dict[str, date] = {}

    ordered = topological_order(tasks, key=scheduling_key)
    if debug_enabled():
        logger.debug(f"Scheduling order: {[task.id for task in ordered]}")

    for task in ordered:
        if task.status == Status.DESCOPED:
            logger.checks(f"Skipping descoped task {task.id} ({task.name})")
            continue
        logger.checks(f"Task {task.id} ({task.name}), {task.priority.value}, {task.status.value}")
        lanes: dict[str, LanePrediction] = {}
        predictions[task.id] = lanes
        for lane in LANE_KEYS:
            lanes[lane] = _schedule_lane(task, lane, config, person_pointer, predictions)

    if changes_enabled():
        scheduled = sum(
            1
            for lanes in predictions.values()
            for prediction in lanes.values()
            if prediction.is_scheduled
        )
        logger.changes(f"Predicted {scheduled} lane(s) across {len(predictions)} task(s)")
    return predictions
