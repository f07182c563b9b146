# backend/barber_booking/services/slots/opening_hours.py
"""
Opening-hours config parsing.

Stored per tenant as JSON text:

    {"seg": {"open": true, "start": "09:00", "end": "18:00",
             "lunchStart": "12:00", "lunchEnd": "13:00"},
     "dom": {"open": false, "start": "09:00", "end": "18:00"},
     ...}

Keys are the seven weekday keys dom..sab (Sunday first). Absent or
malformed entries are treated as closed: the ConfigError is logged here
and never escapes to the slot generator's caller.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, timedelta

from ...errors import ConfigError
from .config import time_str_to_minutes

logger = logging.getLogger(__name__)

# Sunday..Saturday, indexed by (date.weekday() + 1) % 7
DAY_KEYS = ("dom", "seg", "ter", "qua", "qui", "sex", "sab")


@dataclass(frozen=True)
class DayHours:
    """Resolved open window of one weekday, in minutes since midnight."""
    start_min: int
    end_min: int
    lunch_start_min: int | None = None
    lunch_end_min: int | None = None

    def in_lunch(self, minute: int) -> bool:
        if self.lunch_start_min is None or self.lunch_end_min is None:
            return False
        return self.lunch_start_min <= minute < self.lunch_end_min


def day_key_for(target_date: date) -> str:
    """Weekday key of a calendar date (no time-zone arithmetic involved)."""
    return DAY_KEYS[(target_date.weekday() + 1) % 7]


def load_opening_hours(raw: str | dict | None) -> dict:
    """
    Decode stored opening hours into a dict.

    Undecodable JSON yields an empty config (every day closed).
    """
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        data = json.loads(raw) if raw else {}
    except json.JSONDecodeError:
        logger.warning("Opening hours are not valid JSON, treating all days as closed")
        return {}
    if not isinstance(data, dict):
        logger.warning("Opening hours are not a JSON object, treating all days as closed")
        return {}
    return data


def parse_day_entry(entry) -> DayHours | None:
    """
    Parse one weekday entry.

    Returns None for a closed day. Raises ConfigError when the entry is
    marked open but its window is unusable.
    """
    if not isinstance(entry, dict):
        raise ConfigError(f"Opening-hours entry must be an object, got {type(entry).__name__}")

    if entry.get("open") is not True:
        return None

    try:
        start_min = time_str_to_minutes(str(entry["start"]))
        end_min = time_str_to_minutes(str(entry["end"]))
    except (KeyError, ValueError, TypeError) as e:
        raise ConfigError(f"Invalid start/end in opening-hours entry: {e}") from e

    if start_min >= end_min:
        raise ConfigError(
            f"Opening-hours start {entry['start']} is not before end {entry['end']}"
        )

    lunch_start_min, lunch_end_min = _parse_lunch(entry)
    return DayHours(start_min, end_min, lunch_start_min, lunch_end_min)


def resolve_day_hours(opening_hours: dict, target_date: date) -> DayHours | None:
    """
    Resolve the open window for target_date.

    Absent and malformed entries both resolve to None (closed).
    """
    key = day_key_for(target_date)
    entry = opening_hours.get(key) if opening_hours else None
    if entry is None:
        return None
    try:
        return parse_day_entry(entry)
    except ConfigError as e:
        logger.warning(f"Opening hours for '{key}' treated as closed: {e}")
        return None


def validate_opening_hours(opening_hours: dict) -> dict:
    """
    Strict validation used by tenant settings before persisting.

    Raises ConfigError on unknown keys or unusable open entries.
    """
    unknown = set(opening_hours) - set(DAY_KEYS)
    if unknown:
        raise ConfigError(f"Unknown weekday keys: {', '.join(sorted(unknown))}")
    for key, entry in opening_hours.items():
        try:
            parse_day_entry(entry)
        except ConfigError as e:
            raise ConfigError(f"{key}: {e}") from e
    return opening_hours


def is_day_open(opening_hours: dict | None, target_date: date) -> bool:
    """
    Date-strip openness check.

    A tenant without any opening-hours config counts as open every day;
    otherwise a day is open unless its entry says open=false.
    Only the open flag is read: an open entry with an unusable window is
    listed here even though the slot generator yields nothing for it.
    """
    if not opening_hours:
        return True
    entry = opening_hours.get(day_key_for(target_date))
    if isinstance(entry, dict):
        return entry.get("open") is not False
    return True


def list_open_dates(
    opening_hours: dict | None,
    start: date,
    count: int,
) -> list[date]:
    """Next `count` open calendar dates starting at `start` (inclusive)."""
    if count <= 0:
        return []
    if opening_hours and not any(
        is_day_open(opening_hours, start + timedelta(days=i)) for i in range(7)
    ):
        return []

    dates = []
    current = start
    while len(dates) < count:
        if is_day_open(opening_hours, current):
            dates.append(current)
        current += timedelta(days=1)
    return dates


# ── Helpers ──────────────────────────────────────────────────────────────


def _parse_lunch(entry: dict) -> tuple[int | None, int | None]:
    lunch_start = entry.get("lunchStart")
    lunch_end = entry.get("lunchEnd")
    if not lunch_start or not lunch_end:
        return None, None
    try:
        lunch_start_min = time_str_to_minutes(str(lunch_start))
        lunch_end_min = time_str_to_minutes(str(lunch_end))
    except ValueError:
        logger.warning(f"Ignoring malformed lunch break {lunch_start!r}-{lunch_end!r}")
        return None, None
    if lunch_start_min >= lunch_end_min:
        logger.warning(f"Ignoring empty lunch break {lunch_start}-{lunch_end}")
        return None, None
    return lunch_start_min, lunch_end_min
