# backend/barber_booking/routers/bookings.py
"""
Booking endpoints.

POST /bookings/                 - Public multi-service submission (slug-scoped)
GET  /bookings/agenda           - Tenant agenda of a day
GET  /bookings/{id}             - Single booking
POST /bookings/{id}/{action}    - confirm / complete / cancel
"""

import logging
from datetime import date, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import ConflictError, NotFoundError, StateError, TransientStoreError
from ..models import Bookings as DBBookings
from ..schemas.bookings import (
    AgendaResponse,
    BookingRead,
    BookingSubmit,
    BookingSubmitResponse,
)
from ..services.bookings.guard import Customer, submit_booking, transition_booking
from ..services.bookings.repository import get_booking as load_booking
from ..services.bookings.repository import list_bookings
from ..services.events import emit_event
from ..services.slots import generate_slots, get_booking_config
from ..services.tenant_settings import get_staff_member, get_tenant, get_tenant_by_slug

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])

AGENDA_STATUSES = ("pending", "confirmed", "completed")


@router.post("/", response_model=BookingSubmitResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingSubmit,
    db: Session = Depends(get_db),
):
    """
    Create one booking per selected service for one slot.

    Steps:
    1. Resolve tenant by slug and validate staff member
    2. Validate the time is a bookable slot of that day
    3. Submit through the conflict guard (409 on conflict)
    4. Emit booking_created event
    """
    # Step 1: tenant and staff
    try:
        tenant = get_tenant_by_slug(db, data.slug)
        if data.staff_id:
            get_staff_member(db, tenant.id, data.staff_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    # Step 2: the slot must exist for that day (opening hours, not past)
    config = get_booking_config()
    now = datetime.now()
    if not now.date() <= data.date <= now.date() + timedelta(days=config.horizon_days):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{data.date.isoformat()} is outside the booking window",
        )
    slots = generate_slots(data.date, tenant.opening_hours, config.slot_step_minutes, now)
    if data.time not in slots:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{data.date.isoformat()} {data.time} is not a bookable slot",
        )

    # Step 3: conflict guard
    initial_status = "pending" if tenant.requires_approval else "confirmed"
    customer = Customer(
        name=data.customer_name.strip(),
        phone=data.customer_phone,
        birthday=data.customer_birthday,
    )
    try:
        created = submit_booking(
            db,
            tenant_id=tenant.id,
            staff_id=data.staff_id,
            target_date=data.date,
            time_str=data.time,
            service_ids=data.service_ids,
            customer=customer,
            status=initial_status,
        )
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TransientStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    # Step 4: notify
    emit_event("booking_created", {
        "tenant_id": tenant.id,
        "booking_ids": [b.id for b in created],
        "staff_id": data.staff_id,
        "date": data.date.isoformat(),
        "time": data.time,
        "status": initial_status,
    })

    return BookingSubmitResponse(
        bookings=[BookingRead.model_validate(b) for b in created],
        status=initial_status,
    )


@router.get("/agenda", response_model=AgendaResponse)
def get_agenda(
    tenant_id: int,
    target_date: date = Query(..., alias="date"),
    staff_id: int | None = None,
    db: Session = Depends(get_db),
):
    """Non-cancelled bookings of a tenant for a day, ordered by time."""
    try:
        get_tenant(db, tenant_id)
        bookings = list_bookings(db, tenant_id, target_date, staff_id, AGENDA_STATUSES)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except TransientStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return AgendaResponse(
        tenant_id=tenant_id,
        date=target_date,
        staff_id=staff_id,
        bookings=[BookingRead.model_validate(b) for b in bookings],
    )


@router.get("/{id}", response_model=BookingRead)
def get_booking(id: int, db: Session = Depends(get_db)):
    try:
        return load_booking(db, id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")


@router.post("/{id}/{action}", response_model=BookingRead)
def change_booking_status(
    id: int,
    action: str,
    db: Session = Depends(get_db),
):
    """Apply confirm / complete / cancel to a booking."""
    if action not in ("confirm", "complete", "cancel"):
        raise HTTPException(status_code=404, detail="Unknown action")

    try:
        booking: DBBookings = transition_booking(db, id, action)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")
    except StateError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(e), "current_status": e.current},
        )
    except TransientStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    emit_event("booking_status_changed", {
        "tenant_id": booking.tenant_id,
        "booking_id": booking.id,
        "status": booking.status,
    })
    return booking
