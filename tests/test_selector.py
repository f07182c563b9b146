"""Tests for the last-request-wins slot picker."""

import asyncio

import pytest

from barber_booking.services.slots.selector import SlotSelector

from conftest import MONDAY, SUNDAY


class ControlledFetch:
    """Fetcher whose responses are released by the test, in any order."""

    def __init__(self):
        self.pending: dict[tuple, asyncio.Future] = {}
        self.calls = []

    async def __call__(self, target_date, staff_id):
        key = (target_date, staff_id)
        self.calls.append(key)
        future = asyncio.get_running_loop().create_future()
        self.pending[key] = future
        return await future

    def resolve(self, target_date, staff_id, slots):
        self.pending.pop((target_date, staff_id)).set_result(slots)


async def test_late_response_for_older_date_is_discarded():
    fetch = ControlledFetch()
    selector = SlotSelector(fetch)

    first = asyncio.create_task(selector.load(SUNDAY))
    await asyncio.sleep(0)
    second = asyncio.create_task(selector.load(MONDAY))
    await asyncio.sleep(0)

    fetch.resolve(MONDAY, None, ["09:00", "09:30"])
    assert await second == ["09:00", "09:30"]

    fetch.resolve(SUNDAY, None, ["15:00"])
    assert await first is None

    assert selector.date == MONDAY
    assert selector.slots == ["09:00", "09:30"]


async def test_staff_change_supersedes_previous_load():
    fetch = ControlledFetch()
    selector = SlotSelector(fetch)

    first = asyncio.create_task(selector.load(MONDAY, 1))
    await asyncio.sleep(0)
    second = asyncio.create_task(selector.load(MONDAY, 2))
    await asyncio.sleep(0)

    fetch.resolve(MONDAY, 1, ["09:00"])
    fetch.resolve(MONDAY, 2, ["10:00"])

    assert await first is None
    assert await second == ["10:00"]
    assert selector.staff_id == 2


async def test_choose_requires_listed_slot():
    async def fetch(target_date, staff_id):
        return ["09:00", "09:30"]

    selector = SlotSelector(fetch)
    await selector.load(MONDAY)

    selector.choose("09:30")
    assert selector.selected == "09:30"

    with pytest.raises(ValueError):
        selector.choose("12:00")


async def test_new_load_clears_selection():
    async def fetch(target_date, staff_id):
        return ["09:00"]

    selector = SlotSelector(fetch)
    await selector.load(MONDAY)
    selector.choose("09:00")

    await selector.load(MONDAY)
    assert selector.selected is None


async def test_refresh_after_conflict_rederives_availability():
    taken = set()

    async def fetch(target_date, staff_id):
        return [t for t in ("09:00", "09:30") if t not in taken]

    selector = SlotSelector(fetch)
    await selector.load(MONDAY, 3)
    selector.choose("09:00")

    taken.add("09:00")  # someone else won the slot
    slots = await selector.refresh_after_conflict()

    assert slots == ["09:30"]
    assert selector.selected is None
    assert selector.staff_id == 3


async def test_refresh_without_load_is_noop():
    async def fetch(target_date, staff_id):
        raise AssertionError("should not fetch")

    assert await SlotSelector(fetch).refresh_after_conflict() is None
