"""할당 원장 로그 도메인 모델.

카운터(cylinders_allocated / cylinders_remaining)가 바뀔 때마다 같은 트랜잭션 안에서 한 건씩 남긴다.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel


class AllocationTransactionType(StrEnum):
    CONSUME = "consume"  # 예약 생성으로 잔여 1 차감
    REFUND = "refund"  # 예약 거절로 잔여 1 복구
    ADJUST = "adjust"  # 관리자 할당 조정 (할당/잔여 동시 증감)


class AllocationTransaction(BaseModel):
    id: str | None = None
    user_id: str
    type: AllocationTransactionType
    delta: int
    booking_id: str | None = None
    acting_user_id: str | None = None
    allocated_after: int
    remaining_after: int
    created_at: datetime
