"""할당 원장 서비스.

유저의 연간 실린더 할당(cylinders_allocated / cylinders_remaining)과 예약 상태 머신을 함께 관리한다.

불변식: 모든 유저에 대해 항상
    cylinders_remaining == cylinders_allocated - (pending/approved/delivered 예약 수)
- 예약 생성: 잔여 1 차감 + pending 예약 생성을 하나의 트랜잭션으로 처리
- 거절: pending -> rejected 전이 + 잔여 1 복구를 하나의 트랜잭션으로 처리
- 관리자 조정: 할당/잔여를 같은 트랜잭션 안에서 조건부로 함께 증감

권한은 호출자가 넘긴 값이 아니라, 매 호출 시점에 저장소의 프로필 role 로 판단한다.
알림 메일과 이벤트 발행은 커밋 이후 best-effort 로 처리한다.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends
from pymongo.database import Database

from common.models.user import User
from common.mongo.client import get_client, get_database
from common.types.datetime import utc_now

from ..config import load_ledger_config
from ..exceptions import (
    BookingNotFound,
    DuplicateOperation,
    Forbidden,
    InsufficientAllocation,
    InvalidTransition,
    UserNotFound,
)
from ..models.allocation import AllocationTransaction, AllocationTransactionType
from ..models.booking import (
    Booking,
    BookingStatus,
    PaymentMethod,
    can_transition,
)
from ..repositories.allocation_repository import AllocationTransactionRepository
from ..repositories.booking_repository import BookingRepository
from ..repositories.interfaces import (
    AllocationTransactionRepositoryInterface,
    BookingRepositoryInterface,
    TransactionRunnerInterface,
    UserRepositoryInterface,
)
from ..repositories.transaction import MongoTransactionRunner
from ..repositories.user_repository import UserRepository
from .event_publisher import BookingEventPublisher, get_event_publisher
from .notification_service import Notifier, get_notifier


ALLOWED_ADJUST_DELTAS = (1, -1)


class LedgerService:
    """예약 생성/상태 전이/할당 조정 비즈니스 로직."""

    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        booking_repo: BookingRepositoryInterface,
        allocation_repo: AllocationTransactionRepositoryInterface,
        transaction_runner: TransactionRunnerInterface,
        notifier: Notifier,
        event_publisher: BookingEventPublisher,
        logger: logging.Logger | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._booking_repo = booking_repo
        self._allocation_repo = allocation_repo
        self._txn = transaction_runner
        self._notifier = notifier
        self._events = event_publisher
        self._logger = logger or logging.getLogger(__name__)

    # 예약 -----------------------------------------------------------------

    def create_booking(
        self,
        user_id: str,
        payment_method: PaymentMethod,
        notes: str = "",
        operation_token: str | None = None,
    ) -> Booking:
        """잔여 1개를 소비하고 pending 예약을 만든다.

        operation_token 이 같은 재요청은 기존 예약을 그대로 반환하며 잔여를 다시 소비하지 않는다.
        """

        def _apply(session: Any) -> tuple[Booking, User | None]:
            if operation_token:
                existing = self._booking_repo.find_by_operation_token(
                    user_id, operation_token, session=session
                )
                if existing is not None:
                    return existing, None

            user = self._user_repo.try_consume(user_id, session=session)
            if user is None:
                if self._user_repo.find_by_user_id(user_id, session=session) is None:
                    raise UserNotFound(user_id)
                raise InsufficientAllocation(user_id)

            now = utc_now()
            booking = self._booking_repo.insert(
                Booking(
                    user_id=user.user_id,
                    user_name=user.name,
                    user_address=user.address,
                    user_phone=user.phone,
                    payment_method=payment_method,
                    notes=notes,
                    status=BookingStatus.PENDING,
                    operation_token=operation_token,
                    created_at=now,
                    updated_at=now,
                ),
                session=session,
            )
            self._allocation_repo.create(
                AllocationTransaction(
                    user_id=user.user_id,
                    type=AllocationTransactionType.CONSUME,
                    delta=-1,
                    booking_id=booking.id,
                    allocated_after=user.cylinders_allocated,
                    remaining_after=user.cylinders_remaining,
                    created_at=now,
                ),
                session=session,
            )
            return booking, user

        try:
            booking, user = self._txn.run(_apply)
        except DuplicateOperation:
            # 같은 토큰의 요청이 동시에 커밋되었다. 먼저 커밋된 예약을 돌려준다.
            assert operation_token is not None
            existing = self._booking_repo.find_by_operation_token(
                user_id, operation_token
            )
            if existing is None:
                raise
            return existing

        if user is None:
            self._logger.info(
                "duplicate booking request resolved by operation token",
                extra={"user_id": user_id, "booking_id": booking.id},
            )
            return booking

        self._logger.info(
            "booking created (remaining=%d)",
            user.cylinders_remaining,
            extra={"user_id": user_id, "booking_id": booking.id},
        )
        self._notifier.booking_confirmation(user.email, user.name, booking.id or "")
        self._events.booking_created(booking, user.cylinders_remaining)
        return booking

    def transition_booking(
        self, booking_id: str, new_status: BookingStatus, acting_user_id: str
    ) -> Booking:
        """pending 예약을 approved 또는 rejected 로 바꾼다. 거절이면 잔여 1을 복구한다."""

        self._require_admin(acting_user_id)
        if not can_transition(BookingStatus.PENDING, new_status):
            raise InvalidTransition(
                booking_id, BookingStatus.PENDING.value, new_status.value
            )

        def _apply(session: Any) -> tuple[Booking, User | None]:
            updated = self._booking_repo.update_status_if(
                booking_id,
                BookingStatus.PENDING,
                new_status,
                acting_user_id,
                session=session,
            )
            if updated is None:
                raise self._transition_failure(booking_id, new_status, session)

            if new_status != BookingStatus.REJECTED:
                return updated, None

            owner = self._user_repo.refund(updated.user_id, session=session)
            if owner is None:
                raise UserNotFound(updated.user_id)
            self._allocation_repo.create(
                AllocationTransaction(
                    user_id=owner.user_id,
                    type=AllocationTransactionType.REFUND,
                    delta=1,
                    booking_id=updated.id,
                    acting_user_id=acting_user_id,
                    allocated_after=owner.cylinders_allocated,
                    remaining_after=owner.cylinders_remaining,
                    created_at=utc_now(),
                ),
                session=session,
            )
            return updated, owner

        booking, owner = self._txn.run(_apply)

        self._logger.info(
            "booking %s by admin",
            booking.status.value,
            extra={
                "booking_id": booking.id,
                "user_id": booking.user_id,
                "acting_user_id": acting_user_id,
            },
        )
        self._after_status_change(booking, BookingStatus.PENDING, acting_user_id, owner)
        return booking

    def deliver_booking(self, booking_id: str, acting_user_id: str) -> Booking:
        """approved 예약을 delivered 로 바꾼다. 잔여 수량은 생성 시 이미 소비되었다."""

        self._require_admin(acting_user_id)

        booking = self._booking_repo.update_status_if(
            booking_id,
            BookingStatus.APPROVED,
            BookingStatus.DELIVERED,
            acting_user_id,
        )
        if booking is None:
            raise self._transition_failure(booking_id, BookingStatus.DELIVERED, None)

        self._logger.info(
            "booking delivered",
            extra={"booking_id": booking.id, "acting_user_id": acting_user_id},
        )
        self._after_status_change(booking, BookingStatus.APPROVED, acting_user_id, None)
        return booking

    def get_booking(self, booking_id: str, acting_user_id: str) -> Booking:
        """예약 단건 조회. 본인 예약이거나 관리자만 볼 수 있다."""

        booking = self._booking_repo.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        if booking.user_id != acting_user_id:
            self._require_admin(acting_user_id)
        return booking

    def list_user_bookings(
        self, user_id: str, page: int = 1, page_size: int = 20
    ) -> tuple[list[Booking], int]:
        return self._booking_repo.list_by_user(user_id, page, page_size)

    def list_bookings(
        self,
        acting_user_id: str,
        status: BookingStatus | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Booking], int]:
        """관리자용 전체 예약 목록 (최신순)."""

        self._require_admin(acting_user_id)
        return self._booking_repo.list(status, page, page_size)

    # 할당 -----------------------------------------------------------------

    def adjust_allocation(self, user_id: str, delta: int, acting_user_id: str) -> User:
        """관리자 할당 조정.

        +1 은 할당/잔여를 함께 1 늘린다. -1 은 아직 소비되지 않은 수량(잔여 > 0)이 있을 때만
        함께 1 줄이며, 없으면 에러 없이 현재 값을 그대로 반환한다.
        """

        if delta not in ALLOWED_ADJUST_DELTAS:
            raise ValueError(f"delta must be +1 or -1, got {delta}")
        self._require_admin(acting_user_id)

        def _apply(session: Any) -> tuple[User, bool]:
            updated = self._user_repo.adjust(user_id, delta, session=session)
            if updated is None:
                current = self._user_repo.find_by_user_id(user_id, session=session)
                if current is None:
                    raise UserNotFound(user_id)
                return current, False

            self._allocation_repo.create(
                AllocationTransaction(
                    user_id=user_id,
                    type=AllocationTransactionType.ADJUST,
                    delta=delta,
                    acting_user_id=acting_user_id,
                    allocated_after=updated.cylinders_allocated,
                    remaining_after=updated.cylinders_remaining,
                    created_at=utc_now(),
                ),
                session=session,
            )
            return updated, True

        user, changed = self._txn.run(_apply)

        if not changed:
            self._logger.info(
                "allocation unchanged, nothing left to remove",
                extra={"user_id": user_id, "acting_user_id": acting_user_id},
            )
            return user

        self._logger.info(
            "allocation adjusted by %+d (allocated=%d, remaining=%d)",
            delta,
            user.cylinders_allocated,
            user.cylinders_remaining,
            extra={"user_id": user_id, "acting_user_id": acting_user_id},
        )
        self._notifier.account_balance(user.email, user.name, user.cylinders_remaining)
        self._events.allocation_adjusted(user, delta, acting_user_id)
        return user

    def get_allocation_history(
        self, user_id: str, acting_user_id: str, page: int = 1, page_size: int = 20
    ) -> tuple[list[AllocationTransaction], int]:
        """할당 원장 이력 조회. 본인 또는 관리자만 볼 수 있다."""

        if user_id != acting_user_id:
            self._require_admin(acting_user_id)
        return self._allocation_repo.list_by_user(user_id, page, page_size)

    # 내부 util -------------------------------------------------------------

    def _require_admin(self, acting_user_id: str) -> User:
        actor = self._user_repo.find_by_user_id(acting_user_id)
        if actor is None or not actor.is_admin:
            self._logger.warning(
                "admin operation denied", extra={"acting_user_id": acting_user_id}
            )
            raise Forbidden(f"admin role required (user_id={acting_user_id})")
        return actor

    def _transition_failure(
        self, booking_id: str, requested: BookingStatus, session: Any
    ) -> Exception:
        current = self._booking_repo.find_by_id(booking_id, session=session)
        if current is None:
            return BookingNotFound(booking_id)
        return InvalidTransition(booking_id, current.status.value, requested.value)

    def _after_status_change(
        self,
        booking: Booking,
        previous_status: BookingStatus,
        acting_user_id: str,
        owner: User | None,
    ) -> None:
        if owner is None:
            try:
                owner = self._user_repo.find_by_user_id(booking.user_id)
            except Exception as exc:  # noqa: BLE001
                self._logger.warning(
                    "failed to load booking owner for notification: %s",
                    exc,
                    extra={"booking_id": booking.id},
                )
        if owner is not None:
            self._notifier.booking_status_update(
                owner.email, owner.name, booking.id or "", booking.status.value
            )
        self._events.booking_status_changed(booking, previous_status, acting_user_id)


def get_ledger_service(
    db: Database = Depends(get_database),
    notifier: Notifier = Depends(get_notifier),
    event_publisher: BookingEventPublisher = Depends(get_event_publisher),
) -> LedgerService:
    """FastAPI DI용 LedgerService 팩토리."""

    config = load_ledger_config()
    return LedgerService(
        user_repo=UserRepository(db),
        booking_repo=BookingRepository(db),
        allocation_repo=AllocationTransactionRepository(db),
        transaction_runner=MongoTransactionRunner(
            get_client(),
            max_attempts=config.max_txn_attempts,
            timeout_seconds=config.operation_timeout_seconds,
        ),
        notifier=notifier,
        event_publisher=event_publisher,
    )
