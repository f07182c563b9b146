# backend/barber_booking/services/bookings/repository.py
"""
Booking persistence.

The store is the only authority on slot conflicts: every submission
inserts one slot_holds row guarded by the partial unique index
(tenant_id, staff_key, date, time) WHERE released = 0, followed by one
bookings row per service, all in a single transaction.

SQLAlchemy errors are translated at this boundary:
IntegrityError on the hold → ConflictError,
OperationalError / disconnects → TransientStoreError.
"""

import logging
from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ...errors import ConflictError, NotFoundError, StateError, TransientStoreError
from ...models import TENANT_WIDE_STAFF_KEY, Bookings, SlotHolds

logger = logging.getLogger(__name__)

# Statuses that occupy a slot for availability purposes
BLOCKING_STATUSES = ("pending", "confirmed")


def staff_key_for(staff_id: int | None) -> int:
    """Effective staff partition key (sentinel for tenant-wide)."""
    return staff_id if staff_id else TENANT_WIDE_STAFF_KEY


# ── Read ─────────────────────────────────────────────────────────────────


def list_bookings(
    db: Session,
    tenant_id: int,
    target_date: date,
    staff_id: int | None = None,
    statuses: tuple[str, ...] | list[str] = BLOCKING_STATUSES,
) -> list[Bookings]:
    """Bookings of a tenant on a date, optionally for one staff member."""
    try:
        query = db.query(Bookings).filter(
            Bookings.tenant_id == tenant_id,
            Bookings.date == target_date.isoformat(),
            Bookings.status.in_(list(statuses)),
        )
        if staff_id:
            query = query.filter(Bookings.staff_id == staff_id)
        return query.order_by(Bookings.time, Bookings.id).all()
    except OperationalError as e:
        raise _transient("list_bookings", e) from e


def list_bookings_between(
    db: Session,
    tenant_id: int,
    date_start: date,
    date_end: date,
    staff_id: int | None = None,
    statuses: tuple[str, ...] | list[str] = BLOCKING_STATUSES,
) -> list[Bookings]:
    """Bookings of a tenant in [date_start, date_end] (ISO text compares in order)."""
    try:
        query = db.query(Bookings).filter(
            Bookings.tenant_id == tenant_id,
            Bookings.date >= date_start.isoformat(),
            Bookings.date <= date_end.isoformat(),
            Bookings.status.in_(list(statuses)),
        )
        if staff_id:
            query = query.filter(Bookings.staff_id == staff_id)
        return query.order_by(Bookings.date, Bookings.time).all()
    except OperationalError as e:
        raise _transient("list_bookings_between", e) from e


def get_booking(db: Session, booking_id: int) -> Bookings:
    obj = db.get(Bookings, booking_id)
    if not obj:
        raise NotFoundError(f"Booking {booking_id} not found")
    return obj


# ── Write ────────────────────────────────────────────────────────────────


def insert_bookings_atomic(
    db: Session,
    tenant_id: int,
    staff_id: int | None,
    date_str: str,
    time_str: str,
    rows: list[dict],
) -> list[Bookings]:
    """
    Insert one hold plus one booking per row as a single transaction.

    Every row shares tenant/staff/date/time with the hold. Any failure
    rolls the whole batch back, so no partial submission is ever visible.

    Raises:
        ConflictError: the tuple is already held by another submission.
        TransientStoreError: the store could not be reached / timed out.
    """
    if not rows:
        raise ValueError("At least one booking row is required")

    hold = SlotHolds(
        tenant_id=tenant_id,
        staff_key=staff_key_for(staff_id),
        date=date_str,
        time=time_str,
    )

    try:
        db.add(hold)
        try:
            db.flush()
        except IntegrityError as e:
            raise ConflictError(tenant_id, staff_id, date_str, time_str) from e

        created = []
        for row in rows:
            booking = Bookings(
                **row,
                tenant_id=tenant_id,
                staff_id=staff_id,
                hold_id=hold.id,
                date=date_str,
                time=time_str,
            )
            db.add(booking)
            db.flush()
            created.append(booking)

        db.commit()
    except ConflictError:
        db.rollback()
        logger.info(
            f"Slot conflict: tenant={tenant_id} staff={staff_id} "
            f"date={date_str} time={time_str}"
        )
        raise
    except OperationalError as e:
        db.rollback()
        raise _transient("insert_bookings_atomic", e) from e
    except Exception:
        db.rollback()
        raise

    for booking in created:
        db.refresh(booking)
    return created


def update_booking_status(
    db: Session,
    booking_id: int,
    from_status: str,
    to_status: str,
) -> Bookings:
    """
    Conditionally move a booking from one status to another.

    The UPDATE only matches while the row still has `from_status`, so a
    status changed by someone else in the meantime fails with StateError.
    Cancelling the last live booking of a submission releases its hold.
    """
    try:
        result = db.execute(
            update(Bookings)
            .where(Bookings.id == booking_id, Bookings.status == from_status)
            .values(status=to_status, updated_at=func.current_timestamp())
        )
        if result.rowcount == 0:
            db.rollback()
            current = db.execute(
                select(Bookings.status).where(Bookings.id == booking_id)
            ).scalar_one_or_none()
            if current is None:
                raise NotFoundError(f"Booking {booking_id} not found")
            raise StateError(booking_id, current, to_status)

        if to_status == "cancelled":
            _release_hold_if_unused(db, booking_id)

        db.commit()
    except (NotFoundError, StateError):
        raise
    except OperationalError as e:
        db.rollback()
        raise _transient("update_booking_status", e) from e
    except Exception:
        db.rollback()
        raise

    booking = db.get(Bookings, booking_id)
    db.refresh(booking)
    return booking


# ── Helpers ──────────────────────────────────────────────────────────────


def _release_hold_if_unused(db: Session, booking_id: int) -> None:
    hold_id = db.execute(
        select(Bookings.hold_id).where(Bookings.id == booking_id)
    ).scalar_one()

    live = db.execute(
        select(func.count(Bookings.id)).where(
            Bookings.hold_id == hold_id,
            Bookings.status != "cancelled",
        )
    ).scalar_one()

    if live == 0:
        db.execute(
            update(SlotHolds).where(SlotHolds.id == hold_id).values(released=1)
        )
        logger.info(f"Slot hold {hold_id} released")


def _transient(operation: str, error: Exception) -> TransientStoreError:
    logger.error(f"Booking store unavailable during {operation}: {error}")
    return TransientStoreError(f"{operation} failed: {error}")
