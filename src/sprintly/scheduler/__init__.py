"""Scheduler package - the sprint prediction engine.

Main entry points:
- compute_predictions: projected start/end for every lane of every task
- task_predicted_end: latest predicted end of one task
- find_cycles: tasks involved in circular dependencies (diagnostic)
- compute_velocity: per-person historical slip
- cascade_risks: late tasks held up by late dependencies
- stamp_planned_ends: freeze first predictions as the slip baseline
"""

from .aggregators import (
    VelocityStats,
    cascade_risks,
    compute_velocity,
    slip_days,
    task_predicted_end,
)
from .calendar import blocked_set, generate_rota_dates, holiday_set, l2_set, leave_set
from .core import UNSCHEDULED, LanePrediction, PredictionMap
from .dependencies import check_dependencies, find_cycles, topological_order
from .engine import compute_predictions, effective_effort, resolve_effective, scheduling_key
from .freeze import stamp_planned_ends
from .snapshot import read_predictions_file, write_predictions_file
from .workdays import (
    advance_workdays,
    is_working_day,
    next_working_day_on_or_after,
    round_half_up,
    round_to_half,
)

__all__ = [
    # Core dataclasses
    "LanePrediction",
    "PredictionMap",
    "UNSCHEDULED",
    # Engine
    "compute_predictions",
    "effective_effort",
    "resolve_effective",
    "scheduling_key",
    # Aggregators
    "task_predicted_end",
    "slip_days",
    "compute_velocity",
    "VelocityStats",
    "cascade_risks",
    "stamp_planned_ends",
    # Dependencies
    "topological_order",
    "find_cycles",
    "check_dependencies",
    # Calendars
    "holiday_set",
    "l2_set",
    "leave_set",
    "blocked_set",
    "generate_rota_dates",
    # Working days
    "is_working_day",
    "advance_workdays",
    "next_working_day_on_or_after",
    "round_to_half",
    "round_half_up",
    # Snapshots
    "write_predictions_file",
    "read_predictions_file",
]
