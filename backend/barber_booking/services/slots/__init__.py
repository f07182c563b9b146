# backend/barber_booking/services/slots/__init__.py
"""
Slots calculation module.

Level 1: Nominal tenant slots from opening hours (cached in Redis Sorted Sets)
Level 2: Availability after booked times (calculated on-the-fly)
"""

from .config import BookingConfig, get_booking_config
from .calculator import generate_slots, nominal_slots, split_by_period
from .redis_store import SlotsRedisStore
from .invalidator import invalidate_tenant_cache
from .availability import compute_available, calculate_day_availability, calculate_calendar
from .opening_hours import list_open_dates
from .selector import SlotSelector

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "generate_slots",
    "nominal_slots",
    "split_by_period",
    "SlotsRedisStore",
    "invalidate_tenant_cache",
    "compute_available",
    "calculate_day_availability",
    "calculate_calendar",
    "list_open_dates",
    "SlotSelector",
]
