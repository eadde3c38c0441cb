from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel


class PaymentStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Payment(BaseModel):
    """결제 조회 모델 (읽기 전용).

    결제 정산 흐름이 payments 컬렉션을 채우며, 이 서비스는 조회만 한다.
    """

    id: str | None = None
    booking_id: str
    user_id: str
    amount: float
    method: str
    status: PaymentStatus
    created_at: datetime
