"""Shared test fixtures and helpers."""

import json
import os
from datetime import date, timedelta

# Settings are read at import time: point them at throwaway values first
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from barber_booking.database import build_engine, get_db, init_db
from barber_booking.main import app
from barber_booking.models import Services, StaffMembers, Tenants
from barber_booking.services.bookings.guard import Customer

WEEKDAY_HOURS = {"open": True, "start": "09:00", "end": "18:00"}

OPENING_HOURS = {
    "dom": {"open": False, "start": "09:00", "end": "18:00"},
    "seg": WEEKDAY_HOURS,
    "ter": WEEKDAY_HOURS,
    "qua": WEEKDAY_HOURS,
    "qui": WEEKDAY_HOURS,
    "sex": WEEKDAY_HOURS,
    "sab": WEEKDAY_HOURS,
}

MONDAY = date(2025, 3, 17)
SUNDAY = date(2025, 3, 16)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'booking.db'}", busy_timeout=10.0)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tenant(db):
    obj = Tenants(
        slug="barbearia-centro",
        name="Barbearia Centro",
        opening_hours=json.dumps(OPENING_HOURS),
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def other_tenant(db):
    obj = Tenants(slug="outra", name="Outra Barbearia", opening_hours=json.dumps(OPENING_HOURS))
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def staff(db, tenant):
    members = [
        StaffMembers(tenant_id=tenant.id, name="Carlos"),
        StaffMembers(tenant_id=tenant.id, name="Rafael"),
    ]
    db.add_all(members)
    db.commit()
    for m in members:
        db.refresh(m)
    return members


@pytest.fixture
def services(db, tenant):
    items = [
        Services(tenant_id=tenant.id, title="Corte", price=45.0),
        Services(tenant_id=tenant.id, title="Barba", price=35.0),
        Services(tenant_id=tenant.id, title="Sobrancelha", price=20.0),
    ]
    db.add_all(items)
    db.commit()
    for s in items:
        db.refresh(s)
    return items


@pytest.fixture
def customer():
    return Customer(name="João Silva", phone="11987654321", birthday=date(1990, 5, 20))


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def next_open_day(start: date | None = None) -> date:
    """First non-Sunday date strictly after `start` (default: today)."""
    current = (start or date.today()) + timedelta(days=1)
    while current.weekday() == 6:
        current += timedelta(days=1)
    return current
