"""할당 원장 로그 레포지토리.

카운터 변경과 같은 세션(트랜잭션)으로 기록되므로, 로그와 카운터는 항상 함께 반영되거나 함께 취소된다.
"""

from __future__ import annotations

from typing import Any

from pymongo.database import Database

from ..models.allocation import AllocationTransaction
from .documents.allocation_document import AllocationTransactionDocument
from .interfaces import AllocationTransactionRepositoryInterface
from .pagination import normalize_page


class AllocationTransactionRepository(AllocationTransactionRepositoryInterface):
    """allocation_transactions 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["allocation_transactions"]

    def create(
        self, tx: AllocationTransaction, *, session: Any = None
    ) -> AllocationTransaction:
        payload = AllocationTransactionDocument.from_domain(tx).to_mongo_record()
        result = self._col.insert_one(payload, session=session)
        return tx.model_copy(update={"id": str(result.inserted_id)})

    def list_by_user(
        self, user_id: str, page: int, page_size: int
    ) -> tuple[list[AllocationTransaction], int]:
        page, page_size, skip = normalize_page(page, page_size)

        total = self._col.count_documents({"user_id": user_id})
        cursor = self._col.find(
            {"user_id": user_id},
            sort=[("created_at", -1), ("_id", -1)],
            skip=skip,
            limit=page_size,
        )

        items: list[AllocationTransaction] = []
        for raw in cursor:
            items.append(AllocationTransactionDocument.model_validate(raw).to_domain())
        return items, total
