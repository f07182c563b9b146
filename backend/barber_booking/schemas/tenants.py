# backend/barber_booking/schemas/tenants.py

import json
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ..services.slots.opening_hours import DAY_KEYS


class DayHours(BaseModel):
    open: bool = False
    start: str = "09:00"
    end: str = "18:00"
    lunch_start: Optional[str] = Field(None, alias="lunchStart")
    lunch_end: Optional[str] = Field(None, alias="lunchEnd")

    model_config = {"populate_by_name": True}


class OpeningHoursUpdate(BaseModel):
    """Full replacement of a tenant's weekly opening hours."""
    opening_hours: dict[str, DayHours]

    @field_validator("opening_hours")
    @classmethod
    def known_days(cls, v: dict[str, DayHours]) -> dict[str, DayHours]:
        unknown = set(v) - set(DAY_KEYS)
        if unknown:
            raise ValueError(f"Unknown weekday keys: {', '.join(sorted(unknown))}")
        return v

    def as_config(self) -> dict:
        """Stored form (camelCase lunch keys, empty lunch fields dropped)."""
        return {
            key: day.model_dump(by_alias=True, exclude_none=True)
            for key, day in self.opening_hours.items()
        }


class TenantPublic(BaseModel):
    id: int
    slug: str
    name: str
    theme_color: Optional[str] = None
    requires_approval: bool
    opening_hours: dict

    model_config = {"from_attributes": True}

    @field_validator("opening_hours", mode="before")
    @classmethod
    def decode_hours(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v) if v else {}
            except json.JSONDecodeError:
                return {}
        return v


class StaffRead(BaseModel):
    id: int
    tenant_id: int
    name: str
    avatar_url: Optional[str] = None

    model_config = {"from_attributes": True}
