# backend/barber_booking/services/bookings/guard.py
"""
Booking conflict guard.

Two layers keep a (tenant, staff, date, time) tuple exclusive:

1. Advisory pre-check against the current booked times. It only narrows
   the race window and gives a fast ConflictError for stale selections.
2. The store-enforced unique hold written in the same transaction as the
   per-service booking rows (see repository.insert_bookings_atomic).
   This is the authority; two concurrent submissions that both pass the
   pre-check still end with exactly one winner.

Conflicts and invalid transitions are never retried here.
"""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from ...errors import ConflictError, NotFoundError, StateError
from ...models import Bookings, Services
from ..slots.availability import get_booked_times
from ..slots.config import normalize_time_str
from .repository import get_booking, insert_bookings_atomic, update_booking_status

logger = logging.getLogger(__name__)

# action → (allowed current statuses, resulting status)
TRANSITIONS: dict[str, tuple[tuple[str, ...], str]] = {
    "confirm": (("pending",), "confirmed"),
    "complete": (("confirmed",), "completed"),
    "cancel": (("pending", "confirmed"), "cancelled"),
}


@dataclass(frozen=True)
class Customer:
    name: str
    phone: str
    birthday: date | None = None


def submit_booking(
    db: Session,
    tenant_id: int,
    staff_id: int | None,
    target_date: date,
    time_str: str,
    service_ids: list[int],
    customer: Customer,
    status: str = "confirmed",
) -> list[Bookings]:
    """
    Book one slot for one customer, one row per selected service.

    Returns:
        The created bookings, ordered like service_ids.

    Raises:
        ConflictError: the slot is already held (pre-check or store).
        NotFoundError: a service does not belong to the tenant.
        ValueError: empty / duplicate service list, bad time, bad status.
        TransientStoreError: store unreachable; caller may retry.
    """
    if status not in ("pending", "confirmed"):
        raise ValueError(f"New bookings start as pending or confirmed, not {status!r}")
    if not service_ids:
        raise ValueError("At least one service is required")
    if len(set(service_ids)) != len(service_ids):
        raise ValueError("Duplicate services in one booking")

    time_str = normalize_time_str(time_str)  # raises ValueError on garbage
    date_str = target_date.isoformat()

    _check_services(db, tenant_id, service_ids)

    # Step 1: advisory pre-check (UX only, racy by nature)
    if time_str in get_booked_times(db, tenant_id, target_date, staff_id):
        logger.info(
            f"Slot already taken (pre-check): tenant={tenant_id} staff={staff_id} "
            f"date={date_str} time={time_str}"
        )
        raise ConflictError(tenant_id, staff_id, date_str, time_str)

    # Step 2: store-enforced atomic insert
    rows = [
        {
            "service_id": service_id,
            "customer_name": customer.name,
            "customer_phone": customer.phone,
            "customer_birthday": customer.birthday.isoformat() if customer.birthday else None,
            "status": status,
        }
        for service_id in service_ids
    ]
    created = insert_bookings_atomic(db, tenant_id, staff_id, date_str, time_str, rows)

    logger.info(
        f"Booking created: tenant={tenant_id} staff={staff_id} "
        f"date={date_str} time={time_str} services={service_ids} "
        f"ids={[b.id for b in created]}"
    )
    return created


def transition_booking(db: Session, booking_id: int, action: str) -> Bookings:
    """
    Apply a status action (confirm / complete / cancel).

    Raises:
        StateError: action not valid from the booking's current status,
                    or the status changed concurrently.
        NotFoundError: unknown booking.
    """
    if action not in TRANSITIONS:
        raise ValueError(f"Unknown booking action: {action!r}")
    allowed, target = TRANSITIONS[action]

    current = get_booking(db, booking_id).status
    if current not in allowed:
        logger.info(f"Rejected {action} for booking {booking_id} in status {current}")
        raise StateError(booking_id, current, target)

    booking = update_booking_status(db, booking_id, current, target)
    logger.info(f"Booking {booking_id}: {current} → {target}")
    return booking


def confirm_booking(db: Session, booking_id: int) -> Bookings:
    return transition_booking(db, booking_id, "confirm")


def complete_booking(db: Session, booking_id: int) -> Bookings:
    return transition_booking(db, booking_id, "complete")


def cancel_booking(db: Session, booking_id: int) -> Bookings:
    return transition_booking(db, booking_id, "cancel")


def _check_services(db: Session, tenant_id: int, service_ids: list[int]) -> None:
    found = {
        s.id
        for s in db.query(Services).filter(
            Services.id.in_(service_ids),
            Services.tenant_id == tenant_id,
            Services.is_active == 1,
        )
    }
    missing = [sid for sid in service_ids if sid not in found]
    if missing:
        raise NotFoundError(f"Services not available for tenant {tenant_id}: {missing}")
