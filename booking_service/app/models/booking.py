"""예약 도메인 모델과 상태 머신.

상태 전이: pending -> approved -> delivered, pending -> rejected.
delivered / rejected 는 종료 상태이며 이후 어떤 전이도 허용하지 않는다.
예약은 생성 시점에 잔여 수량 1개를 소비하고, 거절될 때만 그 1개를 돌려준다.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel


class BookingStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DELIVERED = "delivered"


class PaymentMethod(StrEnum):
    CASH_ON_DELIVERY = "cash-on-delivery"
    QR_PAYMENT = "qr-payment"


ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED}),
    BookingStatus.APPROVED: frozenset({BookingStatus.DELIVERED}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.DELIVERED: frozenset(),
}

# 잔여 수량을 점유하고 있는 상태 (거절된 예약은 잔여 수량에 포함되지 않는다)
ACTIVE_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.APPROVED, BookingStatus.DELIVERED}
)


def can_transition(current: BookingStatus, new_status: BookingStatus) -> bool:
    return new_status in ALLOWED_TRANSITIONS[current]


class Booking(BaseModel):
    """실린더 1개 배송 요청.

    user_name / user_address / user_phone 은 생성 시점의 스냅샷이며, 이후 프로필이 바뀌어도 갱신하지 않는다.
    """

    id: str | None = None
    user_id: str
    user_name: str
    user_address: str
    user_phone: str
    payment_method: PaymentMethod
    notes: str = ""
    status: BookingStatus = BookingStatus.PENDING
    operation_token: str | None = None  # 클라이언트 재시도 식별용 멱등 토큰
    status_updated_by: str | None = None  # 마지막으로 상태를 바꾼 관리자
    created_at: datetime
    updated_at: datetime
