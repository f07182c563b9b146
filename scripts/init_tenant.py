"""
Bootstrap a tenant (barbershop) with default opening hours.

Usage:
    TENANT_SLUG=barbearia-centro TENANT_NAME="Barbearia Centro" python scripts/init_tenant.py
"""

import json
import os

from barber_booking.database import SessionLocal, init_db
from barber_booking.models import Services, StaffMembers, Tenants


TENANT_SLUG = os.getenv("TENANT_SLUG")
TENANT_NAME = os.getenv("TENANT_NAME", "Barbearia")
STAFF_NAMES = [n.strip() for n in os.getenv("TENANT_STAFF", "").split(",") if n.strip()]

if not TENANT_SLUG:
    raise RuntimeError("TENANT_SLUG is not set")

WEEKDAY = {"open": True, "start": "09:00", "end": "18:00", "lunchStart": "12:00", "lunchEnd": "13:00"}

DEFAULT_OPENING_HOURS = {
    "dom": {"open": False, "start": "09:00", "end": "18:00"},
    "seg": WEEKDAY,
    "ter": WEEKDAY,
    "qua": WEEKDAY,
    "qui": WEEKDAY,
    "sex": WEEKDAY,
    "sab": {"open": True, "start": "09:00", "end": "14:00"},
}

DEFAULT_SERVICES = [
    ("Corte", 45.0),
    ("Barba", 35.0),
]


def main():
    init_db()
    db = SessionLocal()
    try:
        if db.query(Tenants).filter(Tenants.slug == TENANT_SLUG).first():
            print(f"Tenant '{TENANT_SLUG}' already exists, nothing to do")
            return

        tenant = Tenants(
            slug=TENANT_SLUG,
            name=TENANT_NAME,
            opening_hours=json.dumps(DEFAULT_OPENING_HOURS),
        )
        db.add(tenant)
        db.flush()

        for title, price in DEFAULT_SERVICES:
            db.add(Services(tenant_id=tenant.id, title=title, price=price))
        for name in STAFF_NAMES:
            db.add(StaffMembers(tenant_id=tenant.id, name=name))

        db.commit()
        print(f"Tenant '{TENANT_SLUG}' created with id={tenant.id}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
