from __future__ import annotations

from pymongo.database import Database

from common.mongo.types import parse_object_id

from ..models.notice import Notice
from .documents.notice_document import NoticeDocument
from .interfaces import NoticeRepositoryInterface


class NoticeRepository(NoticeRepositoryInterface):
    """notices 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["notices"]

    def insert(self, notice: Notice) -> Notice:
        payload = NoticeDocument.from_domain(notice).to_mongo_record()
        result = self._col.insert_one(payload)
        return notice.model_copy(update={"id": str(result.inserted_id)})

    def list(self, limit: int | None) -> list[Notice]:
        cursor = self._col.find({}, sort=[("created_at", -1), ("_id", -1)])
        if limit:
            cursor = cursor.limit(limit)
        return [NoticeDocument.model_validate(raw).to_domain() for raw in cursor]

    def delete(self, notice_id: str) -> bool:
        object_id = parse_object_id(notice_id)
        if object_id is None:
            return False
        result = self._col.delete_one({"_id": object_id})
        return result.deleted_count > 0
