"""
Error taxonomy of the scheduling core.

ConfigError is absorbed where it is raised (a bad opening-hours entry
means "closed"). ConflictError and StateError are expected, user-actionable
outcomes and reach the caller unmodified. TransientStoreError is a
connectivity / timeout failure the caller may retry; the core never does.
"""


class SchedulingError(Exception):
    """Base class for all scheduling core errors."""


class ConfigError(SchedulingError):
    """Malformed or missing opening-hours entry."""


class ConflictError(SchedulingError):
    """The (tenant, staff, date, time) tuple is already held."""

    def __init__(
        self,
        tenant_id: int,
        staff_id: int | None,
        date: str,
        time: str,
    ):
        self.tenant_id = tenant_id
        self.staff_id = staff_id
        self.date = date
        self.time = time
        scope = f"staff {staff_id}" if staff_id else "tenant-wide"
        super().__init__(
            f"Slot {date} {time} ({scope}) is already booked for tenant {tenant_id}"
        )


class StateError(SchedulingError):
    """Requested status transition is not valid for the current status."""

    def __init__(self, booking_id: int, current: str | None, requested: str):
        self.booking_id = booking_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Booking {booking_id}: cannot move from {current!r} to {requested!r}"
        )


class TransientStoreError(SchedulingError):
    """Connectivity or timeout failure talking to the booking store."""


class NotFoundError(SchedulingError):
    """Unknown tenant, staff member or booking."""
