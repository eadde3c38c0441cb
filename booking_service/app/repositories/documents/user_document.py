from __future__ import annotations

from common.models.user import User, UserRole
from common.mongo.types import BaseDocument, build_document_data_from_domain


class UserDocument(BaseDocument):
    """MongoDB users 컬렉션 도큐먼트 모델."""

    user_id: str
    email: str = ""
    name: str = ""
    phone: str = ""
    address: str = ""
    role: str = UserRole.USER.value
    cylinders_allocated: int = 0
    cylinders_remaining: int = 0

    @classmethod
    def from_domain(cls, user: User) -> "UserDocument":
        data = build_document_data_from_domain(user)
        # User 도메인 모델에는 _id 를 노출하지 않으므로 단순 검증만 수행한다.
        return cls.model_validate(data)

    def to_domain(self) -> User:
        return User(
            user_id=self.user_id,
            email=self.email,
            name=self.name,
            phone=self.phone,
            address=self.address,
            role=UserRole(self.role),
            cylinders_allocated=self.cylinders_allocated,
            cylinders_remaining=self.cylinders_remaining,
            created_at=self.created_at,
            updated_at=self.updated_at or self.created_at,
        )
