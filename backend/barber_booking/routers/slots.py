# backend/barber_booking/routers/slots.py
"""
Slots API endpoints.

GET  /slots/day        - Available slots of a tenant for one day
GET  /slots/calendar   - Per-day availability summary for a date range
GET  /slots/open-dates - Next open days (public date strip)
POST /slots/invalidate - Drop cached nominal slots of a tenant
"""

from datetime import date, datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import NotFoundError, TransientStoreError
from ..redis_client import redis_client
from ..schemas.slots import (
    OpenDatesResponse,
    SlotsCalendarResponse,
    SlotsDayResponse,
    SlotsDayStatus,
)
from ..services.slots import (
    calculate_calendar,
    calculate_day_availability,
    get_booking_config,
    invalidate_tenant_cache,
    list_open_dates,
)
from ..services.slots.opening_hours import load_opening_hours
from ..services.tenant_settings import get_staff_member, get_tenant, get_tenant_by_slug


router = APIRouter(prefix="/slots", tags=["slots"])


def _resolve(db: Session, slug: str, staff_id: int | None):
    try:
        tenant = get_tenant_by_slug(db, slug)
        if staff_id:
            get_staff_member(db, tenant.id, staff_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return tenant


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    slug: str,
    staff_id: int | None = None,
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    """Get available time slots of a tenant (optionally one staff member) for a day."""
    config = get_booking_config()
    now = datetime.now()

    today = now.date()
    max_date = today + timedelta(days=config.horizon_days)

    if target_date < today:
        raise HTTPException(status_code=400, detail="Date cannot be in the past")

    if target_date > max_date:
        raise HTTPException(status_code=400, detail=f"Date cannot be more than {config.horizon_days} days ahead")

    tenant = _resolve(db, slug, staff_id)

    try:
        result = calculate_day_availability(
            db=db,
            tenant=tenant,
            target_date=target_date,
            staff_id=staff_id,
            config=config,
            redis=redis_client,
            now=now,
        )
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return SlotsDayResponse(**result)


@router.get("/calendar", response_model=SlotsCalendarResponse)
def get_slots_calendar(
    slug: str,
    staff_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
):
    """Get calendar of days with open slots for a tenant."""
    config = get_booking_config()
    now = datetime.now()

    today = now.date()
    if start_date is None:
        start_date = today
    if end_date is None:
        end_date = start_date + timedelta(days=config.calendar_days - 1)

    if start_date < today:
        start_date = today
    if end_date > today + timedelta(days=config.horizon_days):
        end_date = today + timedelta(days=config.horizon_days)
    if end_date < start_date:
        end_date = start_date

    tenant = _resolve(db, slug, staff_id)

    try:
        days = calculate_calendar(
            db, tenant, start_date, end_date, staff_id, config, redis_client, now
        )
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return SlotsCalendarResponse(
        tenant_id=tenant.id,
        staff_id=staff_id,
        start_date=start_date,
        end_date=end_date,
        days=[SlotsDayStatus(**d) for d in days],
        horizon_days=config.horizon_days,
        slot_step_minutes=config.slot_step_minutes,
    )


@router.get("/open-dates", response_model=OpenDatesResponse)
def get_open_dates(
    slug: str,
    count: int | None = Query(None, ge=1, le=60),
    db: Session = Depends(get_db),
):
    """Next open days of a tenant, starting today."""
    config = get_booking_config()
    tenant = _resolve(db, slug, None)

    dates = list_open_dates(
        load_opening_hours(tenant.opening_hours),
        datetime.now().date(),
        count or config.calendar_days,
    )
    return OpenDatesResponse(tenant_id=tenant.id, dates=dates)


@router.post("/invalidate")
def invalidate_slots_cache(
    tenant_id: int,
    dates: list[date] | None = None,
    db: Session = Depends(get_db),
):
    """Manually invalidate cached nominal slots of a tenant (admin endpoint)."""
    try:
        get_tenant(db, tenant_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    deleted = invalidate_tenant_cache(redis_client, tenant_id, dates)

    return {
        "tenant_id": tenant_id,
        "deleted_keys": deleted,
        "dates": [d.isoformat() for d in dates] if dates else "all",
    }
