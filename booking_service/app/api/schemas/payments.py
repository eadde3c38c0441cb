from __future__ import annotations

from pydantic import BaseModel

from common.types.datetime import UtcDateTime

from ...models.payment import Payment


class PaymentResponse(BaseModel):
    id: str | None
    booking_id: str
    amount: float
    method: str
    status: str
    created_at: UtcDateTime

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            booking_id=payment.booking_id,
            amount=payment.amount,
            method=payment.method,
            status=payment.status.value,
            created_at=payment.created_at,
        )
