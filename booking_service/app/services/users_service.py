from __future__ import annotations

import logging

from fastapi import Depends
from pymongo.database import Database

from common.models.user import SessionInput, User, UserRole
from common.mongo.client import get_database
from common.types.datetime import utc_now

from ..exceptions import Forbidden, UserNotFound
from ..repositories.interfaces import UserRepositoryInterface
from ..repositories.user_repository import UserRepository


class UsersService:
    """세션 시작 시 프로필 확인, 프로필 조회/수정, 관리자용 유저 목록.

    - Repository(UserRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - role 과 할당 카운터는 이 서비스에서 바꾸지 않는다. (카운터는 LedgerService 담당)
    """

    def __init__(
        self, user_repo: UserRepositoryInterface, logger: logging.Logger | None = None
    ) -> None:
        self._user_repo = user_repo
        self._logger = logger or logging.getLogger(__name__)

    def resolve_session(self, input_model: SessionInput) -> User:
        """인증된 identity 를 저장된 프로필로 해석한다.

        프로필이 없으면 할당 0 인 일반 유저로 만든다. 관리자 권한은 절대 암묵적으로 부여하지 않는다.
        이미 있으면 저장된 값을 그대로 돌려준다.
        """

        now = utc_now()
        user = self._user_repo.ensure(
            User(
                user_id=input_model.user_id,
                email=input_model.email,
                name=input_model.name,
                role=UserRole.USER,
                cylinders_allocated=0,
                cylinders_remaining=0,
                created_at=now,
                updated_at=now,
            )
        )
        self._logger.info(
            "session resolved (role=%s)", user.role.value, extra={"user_id": user.user_id}
        )
        return user

    def get_profile(self, user_id: str) -> User:
        user = self._user_repo.find_by_user_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def update_profile(self, user_id: str, name: str, phone: str, address: str) -> User:
        """연락처 정보만 수정한다. 기존 예약의 스냅샷은 바뀌지 않는다."""

        user = self._user_repo.update_profile(user_id, name, phone, address)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def list_users(
        self, acting_user_id: str, page: int = 1, page_size: int = 20
    ) -> tuple[list[User], int]:
        actor = self._user_repo.find_by_user_id(acting_user_id)
        if actor is None or not actor.is_admin:
            raise Forbidden(f"admin role required (user_id={acting_user_id})")
        return self._user_repo.list(page, page_size)


def get_user_repository(
    db: Database = Depends(get_database),
) -> UserRepositoryInterface:
    """FastAPI DI용 UserRepository 팩토리."""

    return UserRepository(db)


def get_users_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
) -> UsersService:
    """FastAPI DI용 UsersService 팩토리."""

    return UsersService(user_repo=user_repo)
