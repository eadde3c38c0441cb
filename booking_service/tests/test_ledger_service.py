from __future__ import annotations

import random

import pytest

from common.models.user import UserRole
from booking_service.app.exceptions import (
    BookingNotFound,
    Forbidden,
    InsufficientAllocation,
    InvalidTransition,
    UserNotFound,
)
from booking_service.app.models.allocation import AllocationTransactionType
from booking_service.app.models.booking import BookingStatus, PaymentMethod


def test_full_booking_lifecycle_keeps_allocation_consistent(ledger) -> None:
    ledger.add_user("user-1", allocated=5)
    ledger.add_admin("admin-1")

    first = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)
    assert first.status == BookingStatus.PENDING
    assert ledger.user("user-1").cylinders_remaining == 4

    approved = ledger.service.transition_booking(
        first.id, BookingStatus.APPROVED, "admin-1"
    )
    assert approved.status == BookingStatus.APPROVED
    assert approved.status_updated_by == "admin-1"
    assert ledger.user("user-1").cylinders_remaining == 4

    delivered = ledger.service.deliver_booking(first.id, "admin-1")
    assert delivered.status == BookingStatus.DELIVERED
    assert ledger.user("user-1").cylinders_remaining == 4

    second = ledger.service.create_booking("user-1", PaymentMethod.QR_PAYMENT)
    assert ledger.user("user-1").cylinders_remaining == 3

    rejected = ledger.service.transition_booking(
        second.id, BookingStatus.REJECTED, "admin-1"
    )
    assert rejected.status == BookingStatus.REJECTED

    user = ledger.user("user-1")
    assert (user.cylinders_allocated, user.cylinders_remaining) == (5, 4)
    ledger.assert_invariant("user-1")
    assert [tx.type for tx in ledger.store.allocation_txs] == [
        AllocationTransactionType.CONSUME,
        AllocationTransactionType.CONSUME,
        AllocationTransactionType.REFUND,
    ]


def test_create_booking_snapshots_contact_details(ledger) -> None:
    ledger.add_user("user-1", allocated=2)

    booking = ledger.service.create_booking(
        "user-1", PaymentMethod.QR_PAYMENT, notes="leave at gate"
    )
    ledger.user_repo.update_profile("user-1", "New Name", "0109999999", "99 New Road")

    stored = ledger.booking_repo.find_by_id(booking.id)
    assert stored.user_name == "name-user-1"
    assert stored.user_address == "12 Gas Street"
    assert stored.user_phone == "0101234567"
    assert stored.notes == "leave at gate"
    assert stored.payment_method == PaymentMethod.QR_PAYMENT


def test_create_booking_fails_when_nothing_remains(ledger) -> None:
    ledger.add_user("user-1", allocated=3, remaining=0)

    with pytest.raises(InsufficientAllocation):
        ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    assert ledger.store.bookings == {}
    assert ledger.store.allocation_txs == []
    assert ledger.sender.sent == []
    assert ledger.user("user-1").cylinders_remaining == 0


def test_create_booking_for_unknown_user(ledger) -> None:
    with pytest.raises(UserNotFound):
        ledger.service.create_booking("ghost", PaymentMethod.CASH_ON_DELIVERY)


def test_create_booking_with_same_operation_token_is_applied_once(ledger) -> None:
    ledger.add_user("user-1", allocated=3)

    first = ledger.service.create_booking(
        "user-1", PaymentMethod.CASH_ON_DELIVERY, operation_token="req-1"
    )
    retried = ledger.service.create_booking(
        "user-1", PaymentMethod.CASH_ON_DELIVERY, operation_token="req-1"
    )

    assert retried.id == first.id
    assert len(ledger.store.bookings) == 1
    assert ledger.user("user-1").cylinders_remaining == 2
    assert len(ledger.sender.sent) == 1
    ledger.assert_invariant("user-1")


def test_create_booking_sends_confirmation_and_publishes_event(ledger) -> None:
    ledger.add_user("user-1", allocated=1)

    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    assert len(ledger.sender.sent) == 1
    message = ledger.sender.sent[0]
    assert message.to == "user-1@example.com"
    assert booking.id in message.body
    assert ledger.bus.event_types() == ["booking.created"]
    topic, event = ledger.bus.published[0]
    assert topic == "gas-booking.booking"
    assert event.key == "user-1"
    assert event.payload["remaining"] == 0


def test_notification_failure_does_not_fail_booking(ledger) -> None:
    ledger.add_user("user-1", allocated=2)
    ledger.sender.fail = True
    ledger.bus.fail = True

    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    assert booking.id in ledger.store.bookings
    assert ledger.sender.attempts == 2
    assert ledger.user("user-1").cylinders_remaining == 1


def test_user_without_email_gets_no_notification(ledger) -> None:
    ledger.add_user("user-1", allocated=1, email="")

    ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    assert ledger.sender.attempts == 0


def test_failed_ledger_write_rolls_back_consumption(ledger) -> None:
    ledger.add_user("user-1", allocated=2)
    ledger.allocation_repo.fail_on_create = True

    with pytest.raises(RuntimeError):
        ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    assert ledger.user("user-1").cylinders_remaining == 2
    assert ledger.store.bookings == {}
    assert ledger.runner.rollbacks == 1


def test_transition_requires_admin_role(ledger) -> None:
    ledger.add_user("user-1", allocated=2)
    ledger.add_user("user-2", allocated=2)
    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    with pytest.raises(Forbidden):
        ledger.service.transition_booking(booking.id, BookingStatus.APPROVED, "user-2")
    with pytest.raises(Forbidden):
        ledger.service.transition_booking(booking.id, BookingStatus.REJECTED, "ghost")

    assert ledger.booking_repo.find_by_id(booking.id).status == BookingStatus.PENDING


def test_role_is_read_from_store_on_every_call(ledger) -> None:
    ledger.add_user("user-1", allocated=2)
    admin = ledger.add_admin("admin-1")
    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)
    ledger.store.users["admin-1"] = admin.model_copy(update={"role": UserRole.USER})

    with pytest.raises(Forbidden):
        ledger.service.transition_booking(booking.id, BookingStatus.APPROVED, "admin-1")


def test_reject_twice_refunds_only_once(ledger) -> None:
    ledger.add_user("user-1", allocated=2)
    ledger.add_admin()
    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    ledger.service.transition_booking(booking.id, BookingStatus.REJECTED, "admin-1")
    with pytest.raises(InvalidTransition):
        ledger.service.transition_booking(booking.id, BookingStatus.REJECTED, "admin-1")

    assert ledger.user("user-1").cylinders_remaining == 2
    ledger.assert_invariant("user-1")


def test_rejecting_approved_booking_is_invalid(ledger) -> None:
    ledger.add_user("user-1", allocated=2)
    ledger.add_admin()
    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)
    ledger.service.transition_booking(booking.id, BookingStatus.APPROVED, "admin-1")

    with pytest.raises(InvalidTransition) as exc_info:
        ledger.service.transition_booking(booking.id, BookingStatus.REJECTED, "admin-1")

    assert exc_info.value.current == "approved"
    assert exc_info.value.requested == "rejected"
    assert ledger.user("user-1").cylinders_remaining == 1


def test_transition_to_delivered_is_not_allowed_from_pending(ledger) -> None:
    ledger.add_user("user-1", allocated=2)
    ledger.add_admin()
    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)
    runs = ledger.runner.runs

    with pytest.raises(InvalidTransition):
        ledger.service.transition_booking(booking.id, BookingStatus.DELIVERED, "admin-1")
    with pytest.raises(InvalidTransition):
        ledger.service.deliver_booking(booking.id, "admin-1")

    assert ledger.runner.runs == runs
    assert ledger.booking_repo.find_by_id(booking.id).status == BookingStatus.PENDING


def test_transition_unknown_booking(ledger) -> None:
    ledger.add_admin()

    with pytest.raises(BookingNotFound):
        ledger.service.transition_booking("missing", BookingStatus.APPROVED, "admin-1")
    with pytest.raises(BookingNotFound):
        ledger.service.deliver_booking("missing", "admin-1")


def test_status_change_notifies_owner(ledger) -> None:
    ledger.add_user("user-1", allocated=1)
    ledger.add_admin()
    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    ledger.service.transition_booking(booking.id, BookingStatus.APPROVED, "admin-1")
    ledger.service.deliver_booking(booking.id, "admin-1")

    subjects = [m.subject for m in ledger.sender.sent]
    assert subjects == [
        "Gas Cylinder Booking Confirmation",
        "Gas Cylinder Booking Approved",
        "Gas Cylinder Booking Delivered",
    ]
    assert ledger.bus.event_types() == [
        "booking.created",
        "booking.status_changed",
        "booking.status_changed",
    ]
    assert ledger.bus.published[-1][1].payload["previous_status"] == "approved"


def test_get_booking_is_limited_to_owner_and_admin(ledger) -> None:
    ledger.add_user("user-1", allocated=1)
    ledger.add_user("user-2")
    ledger.add_admin()
    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)

    assert ledger.service.get_booking(booking.id, "user-1").id == booking.id
    assert ledger.service.get_booking(booking.id, "admin-1").id == booking.id
    with pytest.raises(Forbidden):
        ledger.service.get_booking(booking.id, "user-2")
    with pytest.raises(BookingNotFound):
        ledger.service.get_booking("missing", "user-1")


def test_list_bookings_newest_first_with_status_filter(ledger) -> None:
    ledger.add_user("user-1", allocated=3)
    ledger.add_user("user-2", allocated=3)
    ledger.add_admin()
    b1 = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)
    b2 = ledger.service.create_booking("user-2", PaymentMethod.CASH_ON_DELIVERY)
    b3 = ledger.service.create_booking("user-1", PaymentMethod.QR_PAYMENT)
    ledger.service.transition_booking(b2.id, BookingStatus.APPROVED, "admin-1")

    mine, total = ledger.service.list_user_bookings("user-1")
    assert [b.id for b in mine] == [b3.id, b1.id]
    assert total == 2

    everything, total = ledger.service.list_bookings("admin-1")
    assert [b.id for b in everything] == [b3.id, b2.id, b1.id]
    assert total == 3

    pending, total = ledger.service.list_bookings("admin-1", BookingStatus.PENDING)
    assert [b.id for b in pending] == [b3.id, b1.id]

    with pytest.raises(Forbidden):
        ledger.service.list_bookings("user-1")


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_random_operation_sequences_preserve_invariant(ledger, seed: int) -> None:
    rng = random.Random(seed)
    ledger.add_user("user-1", allocated=4)
    ledger.add_admin()

    for _ in range(60):
        action = rng.choice(["create", "approve", "reject", "deliver", "add", "remove"])
        booking_ids = list(ledger.store.bookings)
        try:
            if action == "create":
                ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)
            elif action in ("approve", "reject") and booking_ids:
                status = (
                    BookingStatus.APPROVED
                    if action == "approve"
                    else BookingStatus.REJECTED
                )
                ledger.service.transition_booking(
                    rng.choice(booking_ids), status, "admin-1"
                )
            elif action == "deliver" and booking_ids:
                ledger.service.deliver_booking(rng.choice(booking_ids), "admin-1")
            elif action == "add":
                ledger.service.adjust_allocation("user-1", 1, "admin-1")
            elif action == "remove":
                ledger.service.adjust_allocation("user-1", -1, "admin-1")
        except (InsufficientAllocation, InvalidTransition):
            pass
        ledger.assert_invariant("user-1")


def test_reject_restores_full_allocation(ledger) -> None:
    ledger.add_user("user-1", allocated=5)
    ledger.add_admin()

    booking = ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)
    user = ledger.user("user-1")
    assert (user.cylinders_allocated, user.cylinders_remaining) == (5, 4)

    ledger.service.transition_booking(booking.id, BookingStatus.REJECTED, "admin-1")
    user = ledger.user("user-1")
    assert (user.cylinders_allocated, user.cylinders_remaining) == (5, 5)

    with pytest.raises(InvalidTransition):
        ledger.service.transition_booking(booking.id, BookingStatus.REJECTED, "admin-1")
    assert ledger.user("user-1").cylinders_remaining == 5
