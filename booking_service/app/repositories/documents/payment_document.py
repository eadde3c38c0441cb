from __future__ import annotations

from common.mongo.types import BaseDocument

from ...models.payment import Payment, PaymentStatus


class PaymentDocument(BaseDocument):
    """MongoDB payments 컬렉션 도큐먼트 모델.

    결제 흐름이 적재한 도큐먼트를 읽기만 하므로 from_domain 은 두지 않는다.
    """

    booking_id: str
    user_id: str
    amount: float
    method: str
    status: str

    def to_domain(self) -> Payment:
        return Payment(
            id=self.str_id,
            booking_id=self.booking_id,
            user_id=self.user_id,
            amount=self.amount,
            method=self.method,
            status=PaymentStatus(self.status),
            created_at=self.created_at,
        )
