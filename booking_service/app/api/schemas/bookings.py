from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from common.types.datetime import UtcDateTime

from ...models.booking import Booking, PaymentMethod


class BookingCreateRequest(BaseModel):
    """예약 생성 요청.

    operation_token 은 클라이언트가 재시도 시 같은 값을 보내 중복 예약을 막는 용도다.
    """

    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    notes: str = Field(default="", max_length=1000)
    operation_token: str | None = Field(default=None, min_length=1, max_length=128)


class BookingStatusUpdateRequest(BaseModel):
    status: Literal["approved", "rejected"]


class BookingResponse(BaseModel):
    id: str | None
    user_id: str
    user_name: str
    user_address: str
    user_phone: str
    payment_method: str
    notes: str
    status: str
    status_updated_by: str | None
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            user_name=booking.user_name,
            user_address=booking.user_address,
            user_phone=booking.user_phone,
            payment_method=booking.payment_method.value,
            notes=booking.notes,
            status=booking.status.value,
            status_updated_by=booking.status_updated_by,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )
