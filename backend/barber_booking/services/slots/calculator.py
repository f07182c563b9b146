# backend/barber_booking/services/slots/calculator.py
"""
Level 1: Opening-hours slot generation.

Produces the ordered "HH:MM" instants of a tenant's open window for one
calendar date, walking [start, end) in fixed steps.

Contains:
✓ opening hours of the weekday (closed / malformed → no slots)
✓ lunch break, when configured
✓ same-day cutoff against an explicit `now`

Does NOT contain:
✗ Bookings (filtered at Level 2)
✗ Staff members (a filter key at Level 2)
"""

from datetime import date, datetime, time

from .config import minutes_to_time_str
from .opening_hours import load_opening_hours, resolve_day_hours


def nominal_slots(
    target_date: date,
    opening_hours: dict | str | None,
    step_minutes: int,
) -> list[str]:
    """
    All slots of the day's open window, ignoring the clock.

    Returns:
        Ascending list of "HH:MM" strings. Empty list = closed.
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    hours = resolve_day_hours(load_opening_hours(opening_hours), target_date)
    if hours is None:
        return []

    slots: list[str] = []
    t = hours.start_min
    while t < hours.end_min:
        if not hours.in_lunch(t):
            slots.append(minutes_to_time_str(t))
        t += step_minutes
    return slots


def drop_past_slots(slots: list[str], target_date: date, now: datetime) -> list[str]:
    """
    Remove instants strictly before `now` when target_date is today.

    "Today" is calendar-date equality with now.date(), never a rolling
    24-hour window.
    """
    if target_date != now.date():
        return list(slots)
    cutoff = now.time().replace(tzinfo=None)
    return [s for s in slots if _as_time(s) >= cutoff]


def generate_slots(
    target_date: date,
    opening_hours: dict | str | None,
    step_minutes: int,
    now: datetime,
) -> list[str]:
    """
    Bookable instants of target_date before any booking is considered.

    Pure function of its inputs: the same arguments always produce the
    same list.
    """
    return drop_past_slots(
        nominal_slots(target_date, opening_hours, step_minutes),
        target_date,
        now,
    )


def split_by_period(slots: list[str]) -> dict[str, list[str]]:
    """Group ordered slots into morning (hour < 12) and afternoon."""
    morning = [s for s in slots if int(s.split(":")[0]) < 12]
    afternoon = [s for s in slots if int(s.split(":")[0]) >= 12]
    return {"morning": morning, "afternoon": afternoon}


def _as_time(value: str) -> time:
    hour, minute = value.split(":")[:2]
    return time(int(hour), int(minute))
