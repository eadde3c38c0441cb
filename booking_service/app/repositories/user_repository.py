from __future__ import annotations

from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.models.user import User
from common.types.datetime import utc_now

from .documents.user_document import UserDocument
from .interfaces import UserRepositoryInterface
from .pagination import normalize_page


class UserRepository(UserRepositoryInterface):
    """users 컬렉션에 대한 MongoDB 접근 레이어.

    카운터 변경은 항상 find_one_and_update 한 번으로 끝나는 조건부 업데이트이며,
    읽은 값을 바탕으로 다시 쓰는(read-then-write) 경로는 두지 않는다.
    """

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["users"]

    @staticmethod
    def _from_document(doc: dict) -> User:
        return UserDocument.model_validate(doc).to_domain()

    def find_by_user_id(self, user_id: str, *, session: Any = None) -> User | None:
        doc = self._col.find_one({"user_id": user_id}, session=session)
        if not doc:
            return None
        return self._from_document(doc)

    def ensure(self, user: User) -> User:
        payload = UserDocument.from_domain(user).to_mongo_record()
        try:
            doc = self._col.find_one_and_update(
                {"user_id": user.user_id},
                {"$setOnInsert": payload},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # 같은 user_id 로 동시에 첫 세션이 열린 경우. 먼저 생성된 프로필을 사용한다.
            doc = self._col.find_one({"user_id": user.user_id})
        assert doc is not None
        return self._from_document(doc)

    def update_profile(
        self, user_id: str, name: str, phone: str, address: str
    ) -> User | None:
        doc = self._col.find_one_and_update(
            {"user_id": user_id},
            {
                "$set": {
                    "name": name,
                    "phone": phone,
                    "address": address,
                    "updated_at": utc_now(),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def list(self, page: int, page_size: int) -> tuple[list[User], int]:
        page, page_size, skip = normalize_page(page, page_size)

        total = self._col.count_documents({})
        cursor = self._col.find(
            {},
            sort=[("created_at", -1), ("_id", -1)],
            skip=skip,
            limit=page_size,
        )
        return [self._from_document(raw) for raw in cursor], total

    def try_consume(self, user_id: str, *, session: Any = None) -> User | None:
        doc = self._col.find_one_and_update(
            {"user_id": user_id, "cylinders_remaining": {"$gt": 0}},
            {
                "$inc": {"cylinders_remaining": -1},
                "$set": {"updated_at": utc_now()},
            },
            return_document=ReturnDocument.AFTER,
            session=session,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def refund(self, user_id: str, *, session: Any = None) -> User | None:
        doc = self._col.find_one_and_update(
            {"user_id": user_id},
            {
                "$inc": {"cylinders_remaining": 1},
                "$set": {"updated_at": utc_now()},
            },
            return_document=ReturnDocument.AFTER,
            session=session,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def adjust(self, user_id: str, delta: int, *, session: Any = None) -> User | None:
        query: dict[str, Any] = {"user_id": user_id}
        if delta < 0:
            # 아직 소비되지 않은 수량이 있을 때만 회수한다. (어느 카운터도 0 아래로 내려가지 않는다)
            query["cylinders_remaining"] = {"$gte": -delta}
            query["cylinders_allocated"] = {"$gte": -delta}

        doc = self._col.find_one_and_update(
            query,
            {
                "$inc": {
                    "cylinders_allocated": delta,
                    "cylinders_remaining": delta,
                },
                "$set": {"updated_at": utc_now()},
            },
            return_document=ReturnDocument.AFTER,
            session=session,
        )
        if not doc:
            return None
        return self._from_document(doc)
