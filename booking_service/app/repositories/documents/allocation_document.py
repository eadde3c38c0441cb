from __future__ import annotations

from common.mongo.types import BaseDocument, build_document_data_from_domain

from ...models.allocation import AllocationTransaction, AllocationTransactionType


class AllocationTransactionDocument(BaseDocument):
    """MongoDB allocation_transactions 컬렉션 도큐먼트 모델."""

    user_id: str
    type: str
    delta: int
    booking_id: str | None = None
    acting_user_id: str | None = None
    allocated_after: int
    remaining_after: int

    @classmethod
    def from_domain(
        cls, tx: AllocationTransaction
    ) -> "AllocationTransactionDocument":
        return cls.model_validate(build_document_data_from_domain(tx))

    def to_domain(self) -> AllocationTransaction:
        return AllocationTransaction(
            id=self.str_id,
            user_id=self.user_id,
            type=AllocationTransactionType(self.type),
            delta=self.delta,
            booking_id=self.booking_id,
            acting_user_id=self.acting_user_id,
            allocated_after=self.allocated_after,
            remaining_after=self.remaining_after,
            created_at=self.created_at,
        )
