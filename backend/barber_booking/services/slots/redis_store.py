# backend/barber_booking/services/slots/redis_store.py
"""
Redis storage for nominal slots using Sorted Sets.

Key format: slots:day:{tenant_id}:{date}
Value: Sorted Set where member = "HH:MM", score = minutes since midnight.

Only the opening-hours derived (Level 1) slots are cached. The same-day
cutoff is applied after reading, and booked times are never cached.
Sentinel: "__empty__" with score=-1 marks "calculated, zero slots".
"""

from datetime import date
from redis import Redis

from .config import BookingConfig, get_booking_config, time_str_to_minutes


EMPTY_SENTINEL = "__empty__"


def _decode(member) -> str:
    return member.decode() if isinstance(member, bytes) else member


class SlotsRedisStore:
    """Redis storage wrapper using Sorted Sets for slot data."""

    KEY_PREFIX = "slots:day"

    def __init__(self, redis: Redis, config: BookingConfig | None = None):
        self.redis = redis
        self.config = config or get_booking_config()

    def _key(self, tenant_id: int, dt: date) -> str:
        return f"{self.KEY_PREFIX}:{tenant_id}:{dt.isoformat()}"

    # ── Write ────────────────────────────────────────────────────────────

    def store_day_slots(
        self,
        tenant_id: int,
        dt: date,
        slots: list[str],
    ) -> None:
        """
        Store nominal slots for a day.

        Args:
            tenant_id: Tenant ID
            dt: Target date
            slots: "HH:MM" strings. Empty list → sentinel is stored.
        """
        self.store_multiple_days(tenant_id, {dt: slots})

    def store_multiple_days(
        self,
        tenant_id: int,
        days_slots: dict[date, list[str]],
    ) -> None:
        """Batch store slots for multiple days via pipeline."""
        if not days_slots:
            return

        pipe = self.redis.pipeline()
        for dt, slots in days_slots.items():
            key = self._key(tenant_id, dt)
            pipe.delete(key)

            if slots:
                pipe.zadd(key, {t: time_str_to_minutes(t) for t in slots})
            else:
                # Empty day: sentinel so EXISTS returns True
                pipe.zadd(key, {EMPTY_SENTINEL: -1})
            pipe.expire(key, self.config.cache_ttl_seconds)

        pipe.execute()

    # ── Read ─────────────────────────────────────────────────────────────

    def get_day_slots(self, tenant_id: int, dt: date) -> list[str] | None:
        """
        Get cached nominal slots for a day.

        Returns:
            Ascending list of "HH:MM" strings, or None on cache miss.
        """
        key = self._key(tenant_id, dt)
        if not self.redis.exists(key):
            return None

        members = self.redis.zrangebyscore(key, 0, "+inf")
        return [_decode(m) for m in members if _decode(m) != EMPTY_SENTINEL]

    def mget_day_slots(
        self,
        tenant_id: int,
        dates: list[date],
    ) -> dict[date, list[str] | None]:
        """
        Batch get nominal slots for multiple dates.

        Returns:
            Dict mapping date → slots (or None on cache miss).
        """
        if not dates:
            return {}

        keys = [self._key(tenant_id, dt) for dt in dates]

        pipe = self.redis.pipeline()
        for key in keys:
            pipe.exists(key)
            pipe.zrangebyscore(key, 0, "+inf")
        raw = pipe.execute()

        result: dict[date, list[str] | None] = {}
        for i, dt in enumerate(dates):
            exists, members = raw[2 * i], raw[2 * i + 1]
            if not exists:
                result[dt] = None
                continue
            result[dt] = [_decode(m) for m in members if _decode(m) != EMPTY_SENTINEL]
        return result

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_day_slots(
        self,
        tenant_id: int,
        dates: list[date] | None = None,
    ) -> int:
        """
        Delete cached slots.

        Args:
            tenant_id: Tenant ID
            dates: Specific dates, or None to delete all for tenant.

        Returns:
            Number of deleted keys.
        """
        if dates:
            keys = [self._key(tenant_id, dt) for dt in dates]
        else:
            pattern = f"{self.KEY_PREFIX}:{tenant_id}:*"
            keys = list(self.redis.scan_iter(match=pattern))

        if not keys:
            return 0

        return self.redis.delete(*keys)
