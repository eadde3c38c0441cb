from __future__ import annotations

from pymongo.database import Database

from ..models.payment import Payment
from .documents.payment_document import PaymentDocument
from .interfaces import PaymentRepositoryInterface
from .pagination import normalize_page


class PaymentRepository(PaymentRepositoryInterface):
    """payments 컬렉션 조회 전용 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["payments"]

    def list_by_user(
        self, user_id: str, page: int, page_size: int
    ) -> tuple[list[Payment], int]:
        page, page_size, skip = normalize_page(page, page_size)

        total = self._col.count_documents({"user_id": user_id})
        cursor = self._col.find(
            {"user_id": user_id},
            sort=[("created_at", -1), ("_id", -1)],
            skip=skip,
            limit=page_size,
        )
        return [PaymentDocument.model_validate(raw).to_domain() for raw in cursor], total

    def find_by_booking(self, booking_id: str) -> Payment | None:
        doc = self._col.find_one(
            {"booking_id": booking_id}, sort=[("created_at", -1)]
        )
        if not doc:
            return None
        return PaymentDocument.model_validate(doc).to_domain()
