"""Tenant settings and staff directory lookups used by the scheduling core."""

import json
import logging

from redis import Redis
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import StaffMembers, Tenants
from .slots.invalidator import invalidate_tenant_cache
from .slots.opening_hours import load_opening_hours, validate_opening_hours

logger = logging.getLogger(__name__)


def get_tenant(db: Session, tenant_id: int) -> Tenants:
    tenant = db.get(Tenants, tenant_id)
    if not tenant or not tenant.is_active:
        raise NotFoundError(f"Tenant {tenant_id} not found")
    return tenant


def get_tenant_by_slug(db: Session, slug: str) -> Tenants:
    tenant = (
        db.query(Tenants)
        .filter(Tenants.slug == slug, Tenants.is_active == 1)
        .first()
    )
    if not tenant:
        raise NotFoundError(f"Tenant '{slug}' not found")
    return tenant


def get_opening_hours(db: Session, tenant_id: int) -> dict:
    """Opening hours of a tenant; undecodable config reads as all-closed."""
    return load_opening_hours(get_tenant(db, tenant_id).opening_hours)


def update_opening_hours(
    db: Session,
    tenant_id: int,
    opening_hours: dict,
    redis: Redis | None = None,
) -> Tenants:
    """
    Replace a tenant's opening hours.

    Raises ConfigError for unusable entries. Cached nominal slots of the
    tenant are dropped once the new hours are committed.
    """
    tenant = get_tenant(db, tenant_id)
    validate_opening_hours(opening_hours)

    tenant.opening_hours = json.dumps(opening_hours, ensure_ascii=False)
    db.commit()
    db.refresh(tenant)

    deleted = invalidate_tenant_cache(redis, tenant_id)
    logger.info(f"Opening hours updated for tenant {tenant_id} (cache keys dropped: {deleted})")
    return tenant


def list_staff(db: Session, tenant_id: int) -> list[StaffMembers]:
    """Active staff members of a tenant."""
    return (
        db.query(StaffMembers)
        .filter(StaffMembers.tenant_id == tenant_id, StaffMembers.is_active == 1)
        .order_by(StaffMembers.name)
        .all()
    )


def get_staff_member(db: Session, tenant_id: int, staff_id: int) -> StaffMembers:
    staff = db.get(StaffMembers, staff_id)
    if not staff or staff.tenant_id != tenant_id or not staff.is_active:
        raise NotFoundError(f"Staff member {staff_id} not found for tenant {tenant_id}")
    return staff
