"""예약/할당 도메인 이벤트 발행.

커밋이 끝난 뒤에만 호출되며, 발행 실패는 로그만 남긴다. (원장 상태는 이미 확정되어 있다)
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict

from common.eventbus.config import is_event_bus_configured
from common.eventbus.core import EventBus
from common.eventbus.helpers import new_json_event
from common.eventbus.kafka import get_kafka_event_bus
from common.eventbus.topics import TOPIC_ALLOCATION, TOPIC_BOOKING
from common.events.booking import (
    EVENT_SOURCE,
    EVENT_VERSION,
    AllocationAdjustedEvent,
    BookingCreatedEvent,
    BookingEventType,
    BookingStatusChangedEvent,
)
from common.models.user import User
from common.types.datetime import utc_now

from ..models.booking import Booking, BookingStatus


class BookingEventPublisher:
    def __init__(
        self, bus: EventBus | None, logger: logging.Logger | None = None
    ) -> None:
        self._bus = bus
        self._logger = logger or logging.getLogger(__name__)

    def booking_created(self, booking: Booking, remaining: int) -> None:
        event_id = str(uuid.uuid4())
        event = BookingCreatedEvent(
            id=event_id,
            type=BookingEventType.BOOKING_CREATED,
            timestamp=utc_now().isoformat(),
            source=EVENT_SOURCE,
            version=EVENT_VERSION,
            booking_id=booking.id or "",
            user_id=booking.user_id,
            payment_method=booking.payment_method.value,
            remaining=remaining,
        )
        self._publish(TOPIC_BOOKING.base, event_id, booking.user_id, asdict(event))

    def booking_status_changed(
        self,
        booking: Booking,
        previous_status: BookingStatus,
        acting_user_id: str,
    ) -> None:
        event_id = str(uuid.uuid4())
        event = BookingStatusChangedEvent(
            id=event_id,
            type=BookingEventType.BOOKING_STATUS_CHANGED,
            timestamp=utc_now().isoformat(),
            source=EVENT_SOURCE,
            version=EVENT_VERSION,
            booking_id=booking.id or "",
            user_id=booking.user_id,
            previous_status=previous_status.value,
            status=booking.status.value,
            acting_user_id=acting_user_id,
            refunded=booking.status == BookingStatus.REJECTED,
        )
        self._publish(TOPIC_BOOKING.base, event_id, booking.user_id, asdict(event))

    def allocation_adjusted(self, user: User, delta: int, acting_user_id: str) -> None:
        event_id = str(uuid.uuid4())
        event = AllocationAdjustedEvent(
            id=event_id,
            type=BookingEventType.ALLOCATION_ADJUSTED,
            timestamp=utc_now().isoformat(),
            source=EVENT_SOURCE,
            version=EVENT_VERSION,
            user_id=user.user_id,
            delta=delta,
            allocated=user.cylinders_allocated,
            remaining=user.cylinders_remaining,
            acting_user_id=acting_user_id,
        )
        self._publish(TOPIC_ALLOCATION.base, event_id, user.user_id, asdict(event))

    def _publish(self, topic: str, event_id: str, key: str, payload: dict) -> None:
        if self._bus is None:
            self._logger.debug("event bus not configured, skip %s", payload["type"])
            return
        try:
            self._bus.publish(topic, new_json_event(payload, event_id=event_id, key=key))
        except Exception as exc:  # noqa: BLE001
            self._logger.error(
                "failed to publish %s event %s: %s", payload["type"], event_id, exc
            )


def get_event_publisher() -> BookingEventPublisher:
    """FastAPI DI용 BookingEventPublisher 팩토리. Kafka 설정이 없으면 발행하지 않는다."""

    bus: EventBus | None = None
    if is_event_bus_configured():
        bus = get_kafka_event_bus()
    return BookingEventPublisher(bus)
