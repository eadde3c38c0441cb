from __future__ import annotations

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..exceptions import Forbidden, NotFound
from ..models.payment import Payment
from ..repositories.interfaces import PaymentRepositoryInterface, UserRepositoryInterface
from ..repositories.payment_repository import PaymentRepository
from .users_service import get_user_repository


class PaymentsService:
    """결제 내역 조회 (읽기 전용)."""

    def __init__(
        self,
        payment_repo: PaymentRepositoryInterface,
        user_repo: UserRepositoryInterface,
    ) -> None:
        self._payment_repo = payment_repo
        self._user_repo = user_repo

    def list_user_payments(
        self, user_id: str, page: int = 1, page_size: int = 20
    ) -> tuple[list[Payment], int]:
        return self._payment_repo.list_by_user(user_id, page, page_size)

    def get_payment_for_booking(self, booking_id: str, acting_user_id: str) -> Payment:
        payment = self._payment_repo.find_by_booking(booking_id)
        if payment is None:
            raise NotFound(f"payment not found for booking {booking_id}")
        if payment.user_id != acting_user_id:
            actor = self._user_repo.find_by_user_id(acting_user_id)
            if actor is None or not actor.is_admin:
                raise Forbidden("payment belongs to another user")
        return payment


def get_payment_repository(
    db: Database = Depends(get_database),
) -> PaymentRepositoryInterface:
    return PaymentRepository(db)


def get_payments_service(
    payment_repo: PaymentRepositoryInterface = Depends(get_payment_repository),
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
) -> PaymentsService:
    """FastAPI DI용 PaymentsService 팩토리."""

    return PaymentsService(payment_repo=payment_repo, user_repo=user_repo)
