"""
backend/barber_booking/services/events.py

Event emitter: pushes booking events to a Redis queue for notification
consumers (confirmation messages, agenda refresh).

Queue:
- events:p2p: instant delivery (booking notifications to specific users)

Emission never fails the caller: a booking that was committed stays
committed even when Redis is down.
"""

import json
import time
import logging

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit a p2p event (instant delivery).

    Pushed to Redis list `events:p2p` for the consumer loop.
    """
    if redis_client is None:
        logger.debug(f"Redis not configured, event {event_type} dropped")
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(P2P_QUEUE, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
