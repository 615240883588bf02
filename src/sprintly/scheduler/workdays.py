"""Working-day arithmetic over weekends and per-person blocked dates."""

import math
from collections.abc import Collection
from datetime import date, timedelta

SATURDAY = 5  # date.weekday() value; Sunday is 6

_ONE_DAY = timedelta(days=1)


def is_weekend(day: date) -> bool:
    return day.weekday() >= SATURDAY


def is_working_day(day: date, blocked: Collection[date]) -> bool:
    """True iff ``day`` is a weekday and not in ``blocked``."""
    return not is_weekend(day) and day not in blocked


def advance_workdays(from_day: date, n: float, blocked: Collection[date]) -> date:
    """Walk forward until ``n`` working days after ``from_day`` have been counted.

    Counting starts strictly after ``from_day``; ``n <= 0`` returns ``from_day``
    unchanged. A fractional ``n`` consumes whole days (2.5 steps three days),
    since the walker only knows calendar days.

    Args:
        from_day: Day the work starts on
        n: Additional working days needed after ``from_day``
        blocked: Dates on which the person cannot work

    Returns:
        The working day on which the count reaches ``n``
    """
    steps = max(0, math.ceil(n))
    current = from_day
    counted = 0
    while counted < steps:
        current += _ONE_DAY
        if is_working_day(current, blocked):
            counted += 1
    return current


def next_working_day_on_or_after(day: date, blocked: Collection[date]) -> date:
    """First working day that is ``day`` or later."""
    current = day
    while not is_working_day(current, blocked):
        current += _ONE_DAY
    return current


def round_to_half(value: float) -> float:
    """Round to the nearest 0.5, halves rounding up (2.25 -> 2.5, -0.25 -> 0.0)."""
    return math.floor(value * 2 + 0.5) / 2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)
