# backend/barber_booking/routers/tenants.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import ConfigError, NotFoundError
from ..redis_client import redis_client
from ..schemas.tenants import OpeningHoursUpdate, StaffRead, TenantPublic
from ..services.tenant_settings import (
    get_tenant_by_slug,
    list_staff,
    update_opening_hours,
)

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get("/{slug}", response_model=TenantPublic)
def get_public_tenant(slug: str, db: Session = Depends(get_db)):
    try:
        return get_tenant_by_slug(db, slug)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")


@router.get("/{slug}/staff", response_model=list[StaffRead])
def list_tenant_staff(slug: str, db: Session = Depends(get_db)):
    try:
        tenant = get_tenant_by_slug(db, slug)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")
    return list_staff(db, tenant.id)


@router.put("/{tenant_id}/opening-hours", response_model=TenantPublic)
def put_opening_hours(
    tenant_id: int,
    data: OpeningHoursUpdate,
    db: Session = Depends(get_db),
):
    try:
        return update_opening_hours(db, tenant_id, data.as_config(), redis_client)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")
    except ConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))
