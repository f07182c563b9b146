from .tables import (
    BOOKING_STATUSES,
    TENANT_WIDE_STAFF_KEY,
    Base,
    Bookings,
    Services,
    SlotHolds,
    StaffMembers,
    Tenants,
    metadata,
)

__all__ = [
    "BOOKING_STATUSES",
    "TENANT_WIDE_STAFF_KEY",
    "Base",
    "Bookings",
    "Services",
    "SlotHolds",
    "StaffMembers",
    "Tenants",
    "metadata",
]
