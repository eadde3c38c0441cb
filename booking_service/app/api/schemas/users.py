from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from common.models.user import User
from common.types.datetime import UtcDateTime

from ...models.allocation import AllocationTransaction


class SessionRequest(BaseModel):
    """Identity Provider 인증 직후 Gateway 가 보내는 세션 시작 요청."""

    user_id: str = Field(min_length=1)
    email: str = ""
    name: str = ""


class ProfileUpdateRequest(BaseModel):
    name: str = Field(min_length=2)
    phone: str = Field(min_length=10)
    address: str = Field(min_length=5)


class AllocationAdjustRequest(BaseModel):
    delta: Literal[1, -1]


class UserProfileResponse(BaseModel):
    user_id: str
    email: str
    name: str
    phone: str
    address: str
    role: str
    cylinders_allocated: int
    cylinders_remaining: int
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, user: User) -> "UserProfileResponse":
        return cls(
            user_id=user.user_id,
            email=user.email,
            name=user.name,
            phone=user.phone,
            address=user.address,
            role=user.role.value,
            cylinders_allocated=user.cylinders_allocated,
            cylinders_remaining=user.cylinders_remaining,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AllocationTransactionResponse(BaseModel):
    id: str | None
    type: str
    delta: int
    booking_id: str | None
    acting_user_id: str | None
    allocated_after: int
    remaining_after: int
    created_at: UtcDateTime

    @classmethod
    def from_domain(cls, tx: AllocationTransaction) -> "AllocationTransactionResponse":
        return cls(
            id=tx.id,
            type=tx.type.value,
            delta=tx.delta,
            booking_id=tx.booking_id,
            acting_user_id=tx.acting_user_id,
            allocated_after=tx.allocated_after,
            remaining_after=tx.remaining_after,
            created_at=tx.created_at,
        )
