from sqlalchemy import (
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata

# Staff key used for tenant-wide holds (NULLs never collide in a unique index)
TENANT_WIDE_STAFF_KEY = 0

BOOKING_STATUSES = ("pending", "confirmed", "completed", "cancelled")


class Tenants(Base):
    __tablename__ = 'tenants'

    slug = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    opening_hours = Column(Text, nullable=False, server_default=text("'{}'"))
    requires_approval = Column(Integer, nullable=False, server_default=text('0'))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    theme_color = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    staff_members = relationship('StaffMembers', back_populates='tenant')
    services = relationship('Services', back_populates='tenant')
    bookings = relationship('Bookings', back_populates='tenant')


class StaffMembers(Base):
    __tablename__ = 'staff_members'

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    avatar_url = Column(Text)

    tenant = relationship('Tenants', back_populates='staff_members')
    bookings = relationship('Bookings', back_populates='staff_member')


class Services(Base):
    __tablename__ = 'services'

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)
    title = Column(Text, nullable=False)
    price = Column(Float, nullable=False, server_default=text('0'))
    duration_min = Column(Integer, nullable=False, server_default=text('30'))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)

    tenant = relationship('Tenants', back_populates='services')
    bookings = relationship('Bookings', back_populates='service')


class SlotHolds(Base):
    """
    One row per customer submission. The partial unique index is the
    authority that keeps a (tenant, staff, date, time) tuple exclusive.
    """
    __tablename__ = 'slot_holds'
    __table_args__ = (
        Index(
            'uq_slot_holds_active',
            'tenant_id', 'staff_key', 'date', 'time',
            unique=True,
            sqlite_where=text('released = 0'),
            postgresql_where=text('released = 0'),
        ),
    )

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)
    staff_key = Column(Integer, nullable=False, server_default=text('0'))
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)
    released = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    bookings = relationship('Bookings', back_populates='hold')


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name='ck_bookings_status',
        ),
        Index('ix_bookings_tenant_date', 'tenant_id', 'date'),
    )

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)
    hold_id = Column(ForeignKey('slot_holds.id', ondelete='CASCADE'), nullable=False)
    service_id = Column(ForeignKey('services.id'), nullable=False)
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    time = Column(Text, nullable=False)  # HH:MM
    customer_name = Column(Text, nullable=False)
    customer_phone = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    id = Column(Integer, primary_key=True)
    staff_id = Column(ForeignKey('staff_members.id', ondelete='SET NULL'))
    customer_birthday = Column(Text)

    tenant = relationship('Tenants', back_populates='bookings')
    hold = relationship('SlotHolds', back_populates='bookings')
    service = relationship('Services', back_populates='bookings')
    staff_member = relationship('StaffMembers', back_populates='bookings')
