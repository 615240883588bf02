"""Sprintly - sprint planning with per-lane delivery predictions."""

from .config import CalendarEvent, EventType, SprintConfig, TaskDelay
from .models import LANE_KEYS, LaneDates, Priority, Status, Task
from .scheduler import (
    LanePrediction,
    PredictionMap,
    compute_predictions,
    compute_velocity,
    find_cycles,
    stamp_planned_ends,
    task_predicted_end,
)

__version__ = "0.1.0"

__all__ = [
    "CalendarEvent",
    "EventType",
    "LANE_KEYS",
    "LaneDates",
    "LanePrediction",
    "PredictionMap",
    "Priority",
    "SprintConfig",
    "Status",
    "Task",
    "TaskDelay",
    "compute_predictions",
    "compute_velocity",
    "find_cycles",
    "stamp_planned_ends",
    "task_predicted_end",
]
