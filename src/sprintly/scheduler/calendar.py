"""Per-person calendars: the set of dates on which someone cannot work."""

from datetime import date, timedelta

from sprintly.config import LEAVE_TYPES, CalendarEvent, EventType, SprintConfig


def holiday_set(config: SprintConfig) -> set[date]:
    """Organization-wide holidays (apply to everyone)."""
    return set(config.holidays or ())


def l2_set(person: str, config: SprintConfig) -> set[date]:
    """Dates on which ``person`` is on rotational support duty."""
    return {
        event.date
        for event in config.calendar_events or ()
        if event.person == person and event.type == EventType.L2
    }


def leave_set(person: str, config: SprintConfig) -> set[date]:
    """Dates on which ``person`` is on planned or unplanned leave."""
    return {
        event.date
        for event in config.calendar_events or ()
        if event.person == person and event.type in LEAVE_TYPES
    }


def blocked_set(person: str, config: SprintConfig) -> frozenset[date]:
    """All non-weekend dates ``person`` cannot work: holidays, L2 duty and leave."""
    return frozenset(holiday_set(config) | l2_set(person, config) | leave_set(person, config))


def generate_rota_dates(
    person: str, iso_weekday: int, start: date, end: date, reason: str | None = None
) -> list[CalendarEvent]:
    """Expand a weekly rota into explicit L2 events.

    Args:
        person: Person on duty
        iso_weekday: Day of the duty, 1=Monday .. 7=Sunday
        start: First date of the window (inclusive)
        end: Last date of the window (inclusive)
        reason: Optional reason attached to every event

    Returns:
        One L2 event per matching weekday in the window, in date order
    """
    if not 1 <= iso_weekday <= 7:
        raise ValueError(f"iso_weekday must be between 1 and 7, got {iso_weekday}")

    events: list[CalendarEvent] = []
    # Jump straight to the first matching weekday
    current = start + timedelta(days=(iso_weekday - start.isoweekday()) % 7)
    while current <= end:
        events.append(CalendarEvent(person=person, date=current, type=EventType.L2, reason=reason))
        current += timedelta(days=7)
    return events
