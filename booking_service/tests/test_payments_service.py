from __future__ import annotations

import pytest

from common.models.user import UserRole
from booking_service.app.exceptions import Forbidden, NotFound
from booking_service.app.models.payment import Payment, PaymentStatus
from booking_service.app.services.payments_service import PaymentsService

from booking_service.tests.fakes import (
    BASE_TIME,
    FakePaymentRepository,
    FakeStore,
    FakeUserRepository,
    build_user,
)


def _build_service() -> PaymentsService:
    store = FakeStore()
    store.users["user-1"] = build_user("user-1")
    store.users["user-2"] = build_user("user-2")
    store.users["admin-1"] = build_user("admin-1", role=UserRole.ADMIN)
    payment_repo = FakePaymentRepository()
    payment_repo.payments.append(
        Payment(
            id="pay-1",
            booking_id="booking-1",
            user_id="user-1",
            amount=850.0,
            method="qr-payment",
            status=PaymentStatus.COMPLETED,
            created_at=BASE_TIME,
        )
    )
    return PaymentsService(
        payment_repo=payment_repo, user_repo=FakeUserRepository(store)
    )


def test_owner_and_admin_can_read_payment() -> None:
    service = _build_service()

    assert service.get_payment_for_booking("booking-1", "user-1").id == "pay-1"
    assert service.get_payment_for_booking("booking-1", "admin-1").id == "pay-1"


def test_other_user_cannot_read_payment() -> None:
    service = _build_service()

    with pytest.raises(Forbidden):
        service.get_payment_for_booking("booking-1", "user-2")


def test_missing_payment() -> None:
    service = _build_service()

    with pytest.raises(NotFound):
        service.get_payment_for_booking("booking-2", "user-1")


def test_list_user_payments() -> None:
    service = _build_service()

    items, total = service.list_user_payments("user-1")
    assert total == 1
    assert items[0].amount == 850.0
    assert service.list_user_payments("user-2") == ([], 0)
