# backend/barber_booking/services/slots/selector.py
"""
Last-request-wins slot picker state for async consumers.

Every date / staff change issues a fresh availability fetch. When an
older fetch resolves after a newer one was issued, its result is dropped
instead of overwriting the newer slots.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import date

logger = logging.getLogger(__name__)

FetchSlots = Callable[[date, int | None], Awaitable[list[str]]]


class SlotSelector:
    """Slot picker bound to one availability fetcher."""

    def __init__(self, fetch: FetchSlots):
        self._fetch = fetch
        self._seq = 0
        self.date: date | None = None
        self.staff_id: int | None = None
        self.slots: list[str] = []
        self.selected: str | None = None

    async def load(self, target_date: date, staff_id: int | None = None) -> list[str] | None:
        """
        Fetch slots for a new date / staff selection.

        Returns the slots, or None when a newer load superseded this one.
        """
        self._seq += 1
        seq = self._seq
        self.date = target_date
        self.staff_id = staff_id
        self.selected = None

        slots = await self._fetch(target_date, staff_id)

        if seq != self._seq:
            logger.debug(f"Discarding stale slots for {target_date} (request {seq}, latest {self._seq})")
            return None

        self.slots = list(slots)
        return self.slots

    def choose(self, time_str: str) -> None:
        if time_str not in self.slots:
            raise ValueError(f"{time_str} is not an available slot")
        self.selected = time_str

    async def refresh_after_conflict(self) -> list[str] | None:
        """Drop the stale selection and re-derive availability."""
        if self.date is None:
            return None
        return await self.load(self.date, self.staff_id)
