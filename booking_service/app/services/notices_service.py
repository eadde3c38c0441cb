from __future__ import annotations

import logging

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database
from common.types.datetime import utc_now

from ..exceptions import Forbidden, NoticeNotFound
from ..models.notice import Notice
from ..repositories.interfaces import NoticeRepositoryInterface, UserRepositoryInterface
from ..repositories.notice_repository import NoticeRepository
from .users_service import get_user_repository


class NoticesService:
    """공지 게시판. 추가/목록/삭제만 있고 수정은 없다.

    작성자와 무관하게 어떤 관리자든 공지를 삭제할 수 있다.
    """

    def __init__(
        self,
        notice_repo: NoticeRepositoryInterface,
        user_repo: UserRepositoryInterface,
        logger: logging.Logger | None = None,
    ) -> None:
        self._notice_repo = notice_repo
        self._user_repo = user_repo
        self._logger = logger or logging.getLogger(__name__)

    def create_notice(self, title: str, body: str, acting_user_id: str) -> Notice:
        self._require_admin(acting_user_id)
        notice = self._notice_repo.insert(
            Notice(
                title=title,
                body=body,
                created_by=acting_user_id,
                created_at=utc_now(),
            )
        )
        self._logger.info(
            "notice created",
            extra={"notice_id": notice.id, "acting_user_id": acting_user_id},
        )
        return notice

    def list_notices(self, limit: int | None = None) -> list[Notice]:
        """최신순 공지 목록. limit 이 없으면 전체를 반환한다."""

        return self._notice_repo.list(limit)

    def delete_notice(self, notice_id: str, acting_user_id: str) -> None:
        self._require_admin(acting_user_id)
        if not self._notice_repo.delete(notice_id):
            raise NoticeNotFound(notice_id)
        self._logger.info(
            "notice deleted",
            extra={"notice_id": notice_id, "acting_user_id": acting_user_id},
        )

    def _require_admin(self, acting_user_id: str) -> None:
        actor = self._user_repo.find_by_user_id(acting_user_id)
        if actor is None or not actor.is_admin:
            raise Forbidden(f"admin role required (user_id={acting_user_id})")


def get_notice_repository(
    db: Database = Depends(get_database),
) -> NoticeRepositoryInterface:
    return NoticeRepository(db)


def get_notices_service(
    notice_repo: NoticeRepositoryInterface = Depends(get_notice_repository),
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
) -> NoticesService:
    """FastAPI DI용 NoticesService 팩토리."""

    return NoticesService(notice_repo=notice_repo, user_repo=user_repo)
