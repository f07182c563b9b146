# backend/barber_booking/schemas/bookings.py

import re
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class BookingSubmit(BaseModel):
    """Public booking form: one slot, one or more services."""
    slug: str
    staff_id: Optional[int] = None
    date: date
    time: str = Field(description="Time in HH:MM format")
    service_ids: list[int] = Field(min_length=1)

    customer_name: str = Field(min_length=3)
    customer_phone: str
    customer_birthday: Optional[date] = Field(
        None, description="DD/MM/YYYY or YYYY-MM-DD"
    )

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Accept HH:MM (or HH:MM:SS) and keep HH:MM."""
        if not re.match(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$", v):
            raise ValueError("Time must be in HH:MM format")
        return v[:5]

    @field_validator("customer_phone")
    @classmethod
    def normalize_phone(cls, v: str) -> str:
        """Keep digits only, preserving a leading +."""
        v = v.strip()
        digits = re.sub(r"\D", "", v)
        if not 8 <= len(digits) <= 15:
            raise ValueError("Phone must have between 8 and 15 digits")
        return ("+" + digits) if v.startswith("+") else digits

    @field_validator("customer_birthday", mode="before")
    @classmethod
    def parse_birthday(cls, v):
        """Birthday as typed in the form (DD/MM/YYYY) or ISO."""
        if v in (None, ""):
            return None
        if isinstance(v, str) and re.match(r"^\d{2}/\d{2}/\d{4}$", v):
            try:
                return datetime.strptime(v, "%d/%m/%Y").date()
            except ValueError:
                raise ValueError("Birthday must be a valid DD/MM/YYYY date")
        return v


class BookingRead(BaseModel):
    id: int

    tenant_id: int
    staff_id: Optional[int] = None
    service_id: int
    hold_id: int

    date: str
    time: str

    customer_name: str
    customer_phone: str
    customer_birthday: Optional[str] = None

    status: str

    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class BookingSubmitResponse(BaseModel):
    bookings: list[BookingRead]
    status: str


class AgendaResponse(BaseModel):
    tenant_id: int
    date: date
    staff_id: Optional[int] = None
    bookings: list[BookingRead]
