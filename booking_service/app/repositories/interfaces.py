from __future__ import annotations

from typing import Any, Callable, Protocol, TypeVar

from common.models.user import User

from ..models.allocation import AllocationTransaction
from ..models.booking import Booking, BookingStatus
from ..models.notice import Notice
from ..models.payment import Payment


T = TypeVar("T")


class TransactionRunnerInterface(Protocol):
    """여러 도큐먼트 쓰기를 하나의 원자적 단위로 실행하는 계약.

    callback 은 세션 핸들을 받아 같은 세션으로 Repository 를 호출한다.
    callback 이 예외를 던지면 모든 쓰기가 취소되어야 한다.
    """

    def run(self, callback: Callable[[Any], T]) -> T:  # pragma: no cover - Protocol
        ...


class UserRepositoryInterface(Protocol):
    """UserRepository가 따라야 할 최소한의 계약.

    카운터 변경 메서드는 모두 단일 도큐먼트 조건부 업데이트로 구현되어야 하며,
    조건이 맞지 않으면(잔여 0 등) 아무것도 바꾸지 않고 None 을 반환한다.
    """

    def find_by_user_id(
        self, user_id: str, *, session: Any = None
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def ensure(self, user: User) -> User:  # pragma: no cover - Protocol
        """user_id 기준으로 없으면 생성하고, 있으면 저장된 프로필을 그대로 반환한다."""
        ...

    def update_profile(
        self, user_id: str, name: str, phone: str, address: str
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def list(
        self, page: int, page_size: int
    ) -> tuple[list[User], int]:  # pragma: no cover - Protocol
        ...

    def try_consume(
        self, user_id: str, *, session: Any = None
    ) -> User | None:  # pragma: no cover - Protocol
        """cylinders_remaining > 0 인 경우에만 1 차감하고 변경 후 유저를 반환한다."""
        ...

    def refund(
        self, user_id: str, *, session: Any = None
    ) -> User | None:  # pragma: no cover - Protocol
        """cylinders_remaining 을 1 복구하고 변경 후 유저를 반환한다."""
        ...

    def adjust(
        self, user_id: str, delta: int, *, session: Any = None
    ) -> User | None:  # pragma: no cover - Protocol
        """할당/잔여를 delta 만큼 함께 조정한다. -1 은 잔여가 있을 때만 적용된다."""
        ...


class BookingRepositoryInterface(Protocol):
    def insert(
        self, booking: Booking, *, session: Any = None
    ) -> Booking:  # pragma: no cover - Protocol
        ...

    def find_by_id(
        self, booking_id: str, *, session: Any = None
    ) -> Booking | None:  # pragma: no cover - Protocol
        ...

    def find_by_operation_token(
        self, user_id: str, operation_token: str, *, session: Any = None
    ) -> Booking | None:  # pragma: no cover - Protocol
        ...

    def update_status_if(
        self,
        booking_id: str,
        expected: BookingStatus,
        new_status: BookingStatus,
        acting_user_id: str,
        *,
        session: Any = None,
    ) -> Booking | None:  # pragma: no cover - Protocol
        """현재 상태가 expected 인 경우에만 new_status 로 바꾸고 변경 후 예약을 반환한다."""
        ...

    def list_by_user(
        self, user_id: str, page: int, page_size: int
    ) -> tuple[list[Booking], int]:  # pragma: no cover - Protocol
        ...

    def list(
        self, status: BookingStatus | None, page: int, page_size: int
    ) -> tuple[list[Booking], int]:  # pragma: no cover - Protocol
        ...


class AllocationTransactionRepositoryInterface(Protocol):
    def create(
        self, tx: AllocationTransaction, *, session: Any = None
    ) -> AllocationTransaction:  # pragma: no cover - Protocol
        ...

    def list_by_user(
        self, user_id: str, page: int, page_size: int
    ) -> tuple[list[AllocationTransaction], int]:  # pragma: no cover - Protocol
        ...


class NoticeRepositoryInterface(Protocol):
    def insert(self, notice: Notice) -> Notice:  # pragma: no cover - Protocol
        ...

    def list(self, limit: int | None) -> list[Notice]:  # pragma: no cover - Protocol
        ...

    def delete(self, notice_id: str) -> bool:  # pragma: no cover - Protocol
        ...


class PaymentRepositoryInterface(Protocol):
    def list_by_user(
        self, user_id: str, page: int, page_size: int
    ) -> tuple[list[Payment], int]:  # pragma: no cover - Protocol
        ...

    def find_by_booking(
        self, booking_id: str
    ) -> Payment | None:  # pragma: no cover - Protocol
        ...
