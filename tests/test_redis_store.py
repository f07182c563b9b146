"""Tests for the nominal-slot cache and its invalidation."""

import json
from datetime import datetime, timedelta

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from barber_booking.errors import ConfigError
from barber_booking.services.slots.availability import (
    calculate_calendar,
    calculate_day_availability,
)
from barber_booking.services.slots.config import BookingConfig
from barber_booking.services.slots.invalidator import (
    get_affected_dates,
    invalidate_tenant_cache,
)
from barber_booking.services.slots.redis_store import EMPTY_SENTINEL, SlotsRedisStore
from barber_booking.services.tenant_settings import update_opening_hours

from conftest import MONDAY, OPENING_HOURS, SUNDAY

EARLY = datetime(2025, 3, 1, 8, 0)


@pytest.fixture
def redis():
    return fakeredis.FakeRedis()


@pytest.fixture
def store(redis):
    return SlotsRedisStore(redis, BookingConfig(cache_ttl_seconds=600))


class BrokenRedis:
    """Client whose every round trip fails."""

    def pipeline(self):
        raise RedisConnectionError("redis is down")

    def scan_iter(self, match=None):
        raise RedisConnectionError("redis is down")

    def delete(self, *keys):
        raise RedisConnectionError("redis is down")


class TestSlotsRedisStore:

    def test_store_and_get(self, store):
        store.store_day_slots(1, MONDAY, ["09:30", "09:00"])
        assert store.get_day_slots(1, MONDAY) == ["09:00", "09:30"]

    def test_miss_is_none(self, store):
        assert store.get_day_slots(1, MONDAY) is None

    def test_empty_day_uses_sentinel(self, store, redis):
        store.store_day_slots(1, SUNDAY, [])
        assert store.get_day_slots(1, SUNDAY) == []
        assert redis.zscore(f"slots:day:1:{SUNDAY.isoformat()}", EMPTY_SENTINEL) == -1

    def test_ttl_applied(self, store, redis):
        store.store_day_slots(1, MONDAY, ["09:00"])
        ttl = redis.ttl(f"slots:day:1:{MONDAY.isoformat()}")
        assert 0 < ttl <= 600

    def test_restore_replaces_previous_slots(self, store):
        store.store_day_slots(1, MONDAY, ["09:00", "09:30"])
        store.store_day_slots(1, MONDAY, ["10:00"])
        assert store.get_day_slots(1, MONDAY) == ["10:00"]

    def test_mget_mixes_hits_and_misses(self, store):
        tuesday = MONDAY + timedelta(days=1)
        store.store_multiple_days(1, {MONDAY: ["09:00"], SUNDAY: []})

        result = store.mget_day_slots(1, [SUNDAY, MONDAY, tuesday])

        assert result == {SUNDAY: [], MONDAY: ["09:00"], tuesday: None}

    def test_tenants_are_isolated(self, store):
        store.store_day_slots(1, MONDAY, ["09:00"])
        assert store.get_day_slots(2, MONDAY) is None

    def test_delete_specific_dates(self, store):
        store.store_multiple_days(1, {MONDAY: ["09:00"], SUNDAY: []})
        assert store.delete_day_slots(1, [MONDAY]) == 1
        assert store.get_day_slots(1, MONDAY) is None
        assert store.get_day_slots(1, SUNDAY) == []

    def test_delete_all_for_tenant(self, store):
        store.store_multiple_days(1, {MONDAY: ["09:00"], SUNDAY: []})
        store.store_day_slots(2, MONDAY, ["09:00"])

        assert store.delete_day_slots(1) == 2
        assert store.get_day_slots(2, MONDAY) == ["09:00"]


class TestInvalidation:

    def test_without_redis_is_noop(self):
        assert invalidate_tenant_cache(None, 1) == 0

    def test_drops_all_tenant_keys(self, redis, store):
        store.store_multiple_days(1, {MONDAY: ["09:00"], SUNDAY: []})
        assert invalidate_tenant_cache(redis, 1) == 2
        assert store.get_day_slots(1, MONDAY) is None

    def test_redis_failure_is_logged_not_raised(self, caplog):
        assert invalidate_tenant_cache(BrokenRedis(), 1) == 0
        assert "Failed to invalidate" in caplog.text

    def test_affected_dates_inclusive(self):
        assert get_affected_dates(SUNDAY, MONDAY) == [SUNDAY, MONDAY]
        assert get_affected_dates(MONDAY, SUNDAY) == [SUNDAY, MONDAY]


class TestCachedAvailability:

    def test_first_call_fills_cache(self, db, tenant, redis):
        result = calculate_day_availability(db, tenant, MONDAY, redis=redis, now=EARLY)

        cached = SlotsRedisStore(redis).get_day_slots(tenant.id, MONDAY)
        assert cached == result["available_times"]
        assert len(cached) == 18

    def test_cache_hit_survives_until_invalidated(self, db, tenant, redis):
        calculate_day_availability(db, tenant, MONDAY, redis=redis, now=EARLY)

        # Opening hours edited behind the cache's back
        tenant.opening_hours = json.dumps({"seg": {"open": True, "start": "09:00", "end": "10:00"}})
        db.commit()

        stale = calculate_day_availability(db, tenant, MONDAY, redis=redis, now=EARLY)
        assert stale["available_count"] == 18

        invalidate_tenant_cache(redis, tenant.id)
        fresh = calculate_day_availability(db, tenant, MONDAY, redis=redis, now=EARLY)
        assert fresh["available_times"] == ["09:00", "09:30"]

    def test_cutoff_applied_after_cache(self, db, tenant, redis):
        calculate_day_availability(db, tenant, MONDAY, redis=redis, now=EARLY)
        later = calculate_day_availability(
            db, tenant, MONDAY, redis=redis, now=datetime(2025, 3, 17, 17, 0)
        )
        assert later["available_times"] == ["17:00", "17:30"]
        assert len(SlotsRedisStore(redis).get_day_slots(tenant.id, MONDAY)) == 18

    def test_calendar_uses_cache(self, db, tenant, redis):
        calculate_calendar(db, tenant, SUNDAY, MONDAY, redis=redis, now=EARLY)
        store = SlotsRedisStore(redis)
        assert store.get_day_slots(tenant.id, SUNDAY) == []
        assert len(store.get_day_slots(tenant.id, MONDAY)) == 18

    def test_broken_redis_falls_back_to_computation(self, db, tenant):
        result = calculate_day_availability(db, tenant, MONDAY, redis=BrokenRedis(), now=EARLY)
        assert result["available_count"] == 18


class TestUpdateOpeningHours:

    def test_update_invalidates_cache(self, db, tenant, redis):
        calculate_day_availability(db, tenant, MONDAY, redis=redis, now=EARLY)

        new_hours = dict(OPENING_HOURS, seg={"open": True, "start": "10:00", "end": "11:00"})
        update_opening_hours(db, tenant.id, new_hours, redis=redis)

        result = calculate_day_availability(db, tenant, MONDAY, redis=redis, now=EARLY)
        assert result["available_times"] == ["10:00", "10:30"]

    def test_invalid_hours_rejected_and_cache_kept(self, db, tenant, redis):
        calculate_day_availability(db, tenant, MONDAY, redis=redis, now=EARLY)

        with pytest.raises(ConfigError):
            update_opening_hours(db, tenant.id, {"seg": {"open": True, "start": "18:00", "end": "09:00"}}, redis=redis)

        assert SlotsRedisStore(redis).get_day_slots(tenant.id, MONDAY) is not None
        db.refresh(tenant)
        assert json.loads(tenant.opening_hours) == OPENING_HOURS
