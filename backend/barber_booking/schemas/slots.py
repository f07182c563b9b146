# backend/barber_booking/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date
from pydantic import BaseModel, Field


class SlotsDayStatus(BaseModel):
    """Status of a single day in calendar."""
    date: date
    has_slots: bool
    open_slots_count: int = 0

    model_config = {"from_attributes": True}


class SlotsCalendarResponse(BaseModel):
    """Response with calendar of available days."""
    tenant_id: int
    staff_id: int | None = None
    start_date: date
    end_date: date
    days: list[SlotsDayStatus]

    # Metadata
    horizon_days: int
    slot_step_minutes: int = Field(description="Slot granularity in minutes (15/30/60)")

    model_config = {"from_attributes": True}


class SlotsDayResponse(BaseModel):
    """Available slots of one day, split at noon."""
    tenant_id: int
    staff_id: int | None = None
    date: date
    slot_step_minutes: int
    available_times: list[str] = Field(description="Ascending HH:MM strings")
    morning: list[str]
    afternoon: list[str]
    available_count: int

    model_config = {"from_attributes": True}


class OpenDatesResponse(BaseModel):
    """Next open days for the public date strip."""
    tenant_id: int
    dates: list[date]
