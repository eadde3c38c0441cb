from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """유저 도메인 모델.

    - Mongo users 컬렉션과 1:1로 매핑되는 공용 모델이다.
    - user_id 는 Identity Provider 가 발급한 불투명 식별자이며 그대로 사용한다.
    - cylinders_allocated / cylinders_remaining 은 예약 원장(LedgerService)만 변경한다.
    """

    user_id: str
    email: str = ""
    name: str = ""
    phone: str = ""
    address: str = ""
    role: UserRole = UserRole.USER
    cylinders_allocated: int = Field(default=0, ge=0)
    cylinders_remaining: int = Field(default=0, ge=0)
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class SessionInput(BaseModel):
    """세션 시작 시 Gateway 가 Identity Provider 인증 결과로 전달하는 입력.

    - role 이나 잔여 수량은 받지 않는다. 권한은 항상 저장소의 프로필 기준으로 판단한다.
    """

    user_id: str
    email: str = ""
    name: str = ""
