from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from booking_service.app.exceptions import InsufficientAllocation
from booking_service.app.models.booking import BookingStatus, PaymentMethod


def _attempt_booking(ledger, user_id: str) -> bool:
    try:
        ledger.service.create_booking(user_id, PaymentMethod.CASH_ON_DELIVERY)
    except InsufficientAllocation:
        return False
    return True


def test_concurrent_bookings_against_last_cylinder(ledger) -> None:
    ledger.add_user("user-1", allocated=1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: _attempt_booking(ledger, "user-1"), range(8)))

    assert results.count(True) == 1
    assert ledger.user("user-1").cylinders_remaining == 0
    assert len(ledger.store.bookings) == 1
    ledger.assert_invariant("user-1")


def test_concurrent_bookings_and_rejections_keep_counts(ledger) -> None:
    ledger.add_user("user-1", allocated=5)
    ledger.add_admin()
    seeded = [
        ledger.service.create_booking("user-1", PaymentMethod.CASH_ON_DELIVERY)
        for _ in range(3)
    ]

    def _reject(booking_id: str) -> None:
        ledger.service.transition_booking(booking_id, BookingStatus.REJECTED, "admin-1")

    with ThreadPoolExecutor(max_workers=6) as pool:
        futures = [pool.submit(_reject, b.id) for b in seeded]
        futures += [pool.submit(_attempt_booking, ledger, "user-1") for _ in range(6)]
        for future in futures:
            future.result()

    ledger.assert_invariant("user-1")
    assert ledger.user("user-1").cylinders_allocated == 5


def test_concurrent_retries_with_same_token_create_one_booking(ledger) -> None:
    ledger.add_user("user-1", allocated=3)

    def _create(_: int) -> str:
        booking = ledger.service.create_booking(
            "user-1", PaymentMethod.QR_PAYMENT, operation_token="retry-token"
        )
        return booking.id

    with ThreadPoolExecutor(max_workers=5) as pool:
        ids = set(pool.map(_create, range(5)))

    assert len(ids) == 1
    assert ledger.user("user-1").cylinders_remaining == 2
