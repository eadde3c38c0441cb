from __future__ import annotations

from .core import Topic


TOPIC_BOOKING = Topic("gas-booking.booking")
TOPIC_ALLOCATION = Topic("gas-booking.allocation")