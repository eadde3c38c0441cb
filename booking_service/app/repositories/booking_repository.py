from __future__ import annotations

from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.mongo.types import parse_object_id
from common.types.datetime import utc_now

from ..exceptions import DuplicateOperation
from ..models.booking import Booking, BookingStatus
from .documents.booking_document import BookingDocument
from .interfaces import BookingRepositoryInterface
from .pagination import normalize_page


class BookingRepository(BookingRepositoryInterface):
    """bookings 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["bookings"]

    @staticmethod
    def _from_document(doc: dict) -> Booking:
        return BookingDocument.model_validate(doc).to_domain()

    def insert(self, booking: Booking, *, session: Any = None) -> Booking:
        payload = BookingDocument.from_domain(booking).to_mongo_record()
        try:
            result = self._col.insert_one(payload, session=session)
        except DuplicateKeyError as exc:
            # uniq_user_operation_token 충돌: 같은 토큰의 예약이 이미 커밋되었다.
            raise DuplicateOperation(
                booking.user_id, booking.operation_token or ""
            ) from exc
        payload["_id"] = result.inserted_id
        return self._from_document(payload)

    def find_by_id(self, booking_id: str, *, session: Any = None) -> Booking | None:
        object_id = parse_object_id(booking_id)
        if object_id is None:
            return None
        doc = self._col.find_one({"_id": object_id}, session=session)
        if not doc:
            return None
        return self._from_document(doc)

    def find_by_operation_token(
        self, user_id: str, operation_token: str, *, session: Any = None
    ) -> Booking | None:
        doc = self._col.find_one(
            {"user_id": user_id, "operation_token": operation_token},
            session=session,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def update_status_if(
        self,
        booking_id: str,
        expected: BookingStatus,
        new_status: BookingStatus,
        acting_user_id: str,
        *,
        session: Any = None,
    ) -> Booking | None:
        object_id = parse_object_id(booking_id)
        if object_id is None:
            return None
        doc = self._col.find_one_and_update(
            {"_id": object_id, "status": expected.value},
            {
                "$set": {
                    "status": new_status.value,
                    "status_updated_by": acting_user_id,
                    "updated_at": utc_now(),
                }
            },
            return_document=ReturnDocument.AFTER,
            session=session,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def list_by_user(
        self, user_id: str, page: int, page_size: int
    ) -> tuple[list[Booking], int]:
        return self._list({"user_id": user_id}, page, page_size)

    def list(
        self, status: BookingStatus | None, page: int, page_size: int
    ) -> tuple[list[Booking], int]:
        query: dict[str, Any] = {}
        if status is not None:
            query["status"] = status.value
        return self._list(query, page, page_size)

    def _list(
        self, query: dict[str, Any], page: int, page_size: int
    ) -> tuple[list[Booking], int]:
        page, page_size, skip = normalize_page(page, page_size)

        total = self._col.count_documents(query)
        cursor = self._col.find(
            query,
            sort=[("created_at", -1), ("_id", -1)],
            skip=skip,
            limit=page_size,
        )
        return [self._from_document(raw) for raw in cursor], total
