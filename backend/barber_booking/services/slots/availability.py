# backend/barber_booking/services/slots/availability.py
"""
Level 2: Availability calculation.

Subtracts booked times from the nominal slots of a day.
Uses set[str] of "HH:MM" time strings.

Takes into account:
- Nominal tenant slots (Level 1, cached in Redis Sorted Set)
- Same-day cutoff against `now`
- Existing pending/confirmed bookings (optionally for one staff member)

Booked times are re-read from the store on every call; this module keeps
no state between calls.
"""

import logging
from datetime import date, datetime

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from ...models import Tenants
from ..bookings.repository import list_bookings, list_bookings_between
from .calculator import drop_past_slots, nominal_slots, split_by_period
from .config import BookingConfig, get_booking_config, normalize_time_str
from .invalidator import get_affected_dates
from .redis_store import SlotsRedisStore

logger = logging.getLogger(__name__)


def compute_available(
    candidate_slots: list[str],
    booked_times: set[str] | list[str],
) -> list[str]:
    """
    Candidate slots minus booked times, order preserved.

    Both sides are compared in canonical "HH:MM" form, so a stored
    "09:00:00" or "9:00" blocks a generated "09:00".
    """
    booked = {normalize_time_str(t) for t in booked_times if t}
    return [s for s in candidate_slots if normalize_time_str(s) not in booked]


def get_booked_times(
    db: Session,
    tenant_id: int,
    target_date: date,
    staff_id: int | None = None,
) -> set[str]:
    """Get set of "HH:MM" times occupied by pending/confirmed bookings."""
    bookings = list_bookings(db, tenant_id, target_date, staff_id)
    return {normalize_time_str(b.time) for b in bookings if b.time}


def calculate_day_availability(
    db: Session,
    tenant: Tenants,
    target_date: date,
    staff_id: int | None = None,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Calculate available time slots for a tenant on a day.

    Returns:
        Dict for SlotsDayResponse.
    """
    config = config or get_booking_config()
    now = now or datetime.now()

    # Step 1: nominal slots (Level 1) and same-day cutoff
    base = _get_base_times(tenant, target_date, config, redis)
    candidates = drop_past_slots(base, target_date, now)

    # Step 2: subtract booked times
    booked = get_booked_times(db, tenant.id, target_date, staff_id)
    available = compute_available(candidates, booked)
    periods = split_by_period(available)

    return {
        "tenant_id": tenant.id,
        "staff_id": staff_id,
        "date": target_date.isoformat(),
        "slot_step_minutes": config.slot_step_minutes,
        "available_times": available,
        "morning": periods["morning"],
        "afternoon": periods["afternoon"],
        "available_count": len(available),
    }


def calculate_calendar(
    db: Session,
    tenant: Tenants,
    start_date: date,
    end_date: date,
    staff_id: int | None = None,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
    now: datetime | None = None,
) -> list[dict]:
    """
    Per-day availability summary for [start_date, end_date].

    Returns:
        List of {"date", "has_slots", "open_slots_count"} dicts.
    """
    config = config or get_booking_config()
    now = now or datetime.now()
    dates = get_affected_dates(start_date, end_date)

    base_by_date = _get_base_times_many(tenant, dates, config, redis)

    booked_by_date: dict[str, set[str]] = {}
    for booking in list_bookings_between(db, tenant.id, dates[0], dates[-1], staff_id):
        booked_by_date.setdefault(booking.date, set()).add(normalize_time_str(booking.time))

    days = []
    for dt in dates:
        candidates = drop_past_slots(base_by_date[dt], dt, now)
        available = compute_available(candidates, booked_by_date.get(dt.isoformat(), set()))
        days.append({
            "date": dt,
            "has_slots": len(available) > 0,
            "open_slots_count": len(available),
        })
    return days


# ── Base times (Level 1 with cache) ─────────────────────────────────────


def _get_base_times(
    tenant: Tenants,
    target_date: date,
    config: BookingConfig,
    redis: Redis | None,
) -> list[str]:
    """Get nominal tenant slots, using Redis cache when available."""
    return _get_base_times_many(tenant, [target_date], config, redis)[target_date]


def _get_base_times_many(
    tenant: Tenants,
    dates: list[date],
    config: BookingConfig,
    redis: Redis | None,
) -> dict[date, list[str]]:
    def calc(dt: date) -> list[str]:
        return nominal_slots(dt, tenant.opening_hours, config.slot_step_minutes)

    if redis is None:
        # No Redis, calculate on the fly
        return {dt: calc(dt) for dt in dates}

    store = SlotsRedisStore(redis, config)
    try:
        cached = store.mget_day_slots(tenant.id, dates)
    except RedisError as e:
        logger.error(f"Slot cache read failed for tenant {tenant.id}: {e}")
        return {dt: calc(dt) for dt in dates}

    result: dict[date, list[str]] = {}
    missing: dict[date, list[str]] = {}
    for dt in dates:
        slots = cached.get(dt)
        if slots is None:
            # Cache miss: calculate and store
            slots = calc(dt)
            missing[dt] = slots
        result[dt] = slots

    if missing:
        try:
            store.store_multiple_days(tenant.id, missing)
        except RedisError as e:
            logger.error(f"Slot cache write failed for tenant {tenant.id}: {e}")

    return result
