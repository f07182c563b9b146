# backend/barber_booking/services/slots/invalidator.py
"""
Cache invalidation for tenant nominal slots.

Triggers:
✓ Tenant opening hours changed → invalidate all dates

Does NOT trigger:
✗ Booking created/cancelled (booked times are never cached)
✗ Staff directory changes (staff is only a filter key)
"""

import logging
from datetime import date, timedelta

from redis import Redis
from redis.exceptions import RedisError

from .redis_store import SlotsRedisStore

logger = logging.getLogger(__name__)


def invalidate_tenant_cache(
    redis: Redis | None,
    tenant_id: int,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached nominal slots for a tenant.

    Args:
        redis: Redis client (None → nothing cached, nothing to do)
        tenant_id: Tenant ID
        dates: List of specific dates to invalidate,
               or None to invalidate all cached dates

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0
    store = SlotsRedisStore(redis)
    try:
        return store.delete_day_slots(tenant_id, dates)
    except RedisError as e:
        logger.error(f"Failed to invalidate slot cache for tenant {tenant_id}: {e}")
        return 0


def get_affected_dates(
    date_start: date,
    date_end: date,
) -> list[date]:
    """
    Get list of dates in range [date_start, date_end].

    Args:
        date_start: Start date (inclusive)
        date_end: End date (inclusive)

    Returns:
        List of dates
    """
    if date_start > date_end:
        date_start, date_end = date_end, date_start

    dates = []
    current = date_start
    while current <= date_end:
        dates.append(current)
        current += timedelta(days=1)

    return dates
