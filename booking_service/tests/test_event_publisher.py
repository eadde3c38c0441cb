from __future__ import annotations

from common.events.booking import (
    AllocationAdjustedEvent,
    BookingCreatedEvent,
    BookingStatusChangedEvent,
)
from common.models.user import UserRole
from booking_service.app.models.booking import Booking, BookingStatus, PaymentMethod
from booking_service.app.services.event_publisher import BookingEventPublisher

from booking_service.tests.fakes import BASE_TIME, RecordingEventBus, build_user


def _booking(status: BookingStatus = BookingStatus.PENDING) -> Booking:
    return Booking(
        id="booking-1",
        user_id="user-1",
        user_name="Alice",
        user_address="1 Main Street",
        user_phone="0101234567",
        payment_method=PaymentMethod.QR_PAYMENT,
        status=status,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )


def test_published_payloads_decode_into_event_contracts() -> None:
    bus = RecordingEventBus()
    publisher = BookingEventPublisher(bus)

    publisher.booking_created(_booking(), remaining=3)
    publisher.booking_status_changed(
        _booking(BookingStatus.REJECTED), BookingStatus.PENDING, "admin-1"
    )
    publisher.allocation_adjusted(
        build_user("user-1", allocated=6, remaining=4), -1, "admin-1"
    )

    created = BookingCreatedEvent.from_dict(bus.published[0][1].payload)
    assert created.payment_method == "qr-payment"
    assert created.remaining == 3
    assert created.id == bus.published[0][1].id

    changed = BookingStatusChangedEvent.from_dict(bus.published[1][1].payload)
    assert (changed.previous_status, changed.status) == ("pending", "rejected")
    assert changed.refunded is True

    adjusted = AllocationAdjustedEvent.from_dict(bus.published[2][1].payload)
    assert (adjusted.allocated, adjusted.remaining, adjusted.delta) == (6, 4, -1)
    assert [topic for topic, _ in bus.published] == [
        "gas-booking.booking",
        "gas-booking.booking",
        "gas-booking.allocation",
    ]


def test_publisher_without_bus_is_noop() -> None:
    publisher = BookingEventPublisher(None)

    publisher.booking_created(_booking(), remaining=0)
    publisher.allocation_adjusted(
        build_user("admin-1", role=UserRole.ADMIN), 1, "admin-1"
    )
