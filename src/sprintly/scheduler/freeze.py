"""Freezing the planned end: the baseline slip is measured against."""

from __future__ import annotations

from sprintly.config import SprintConfig
from sprintly.logger import get_logger
from sprintly.models import Task

from .aggregators import task_predicted_end
from .engine import compute_predictions

logger = get_logger()


def stamp_planned_ends(tasks: list[Task], config: SprintConfig) -> list[Task]:
    """Return tasks with ``planned_end`` set from the current prediction where unset.

    A task is stamped once it has at least one owner, some positive effort and
    a predicted end. A ``planned_end`` that is already set is never changed.
    The input tasks are not modified; stamped tasks are copies.
    """
    predictions = compute_predictions(tasks, config)

    stamped: list[Task] = []
    for task in tasks:
        if task.planned_end is not None or not task.owning_people() or not task.has_effort():
            stamped.append(task)
            continue
        predicted_end = task_predicted_end(task.id, predictions)
        if predicted_end is None:
            stamped.append(task)
            continue
        logger.changes(f"Freezing planned end of task {task.id} ({task.name}) at {predicted_end}")
        stamped.append(task.model_copy(update={"planned_end": predicted_end}))
    return stamped
