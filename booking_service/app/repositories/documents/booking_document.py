from __future__ import annotations

from common.mongo.types import BaseDocument, build_document_data_from_domain

from ...models.booking import Booking, BookingStatus, PaymentMethod


class BookingDocument(BaseDocument):
    """MongoDB bookings 컬렉션 도큐먼트 모델."""

    user_id: str
    user_name: str
    user_address: str
    user_phone: str
    payment_method: str
    notes: str = ""
    status: str
    operation_token: str | None = None
    status_updated_by: str | None = None

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingDocument":
        data = build_document_data_from_domain(booking)
        return cls.model_validate(data)

    def to_domain(self) -> Booking:
        return Booking(
            id=self.str_id,
            user_id=self.user_id,
            user_name=self.user_name,
            user_address=self.user_address,
            user_phone=self.user_phone,
            payment_method=PaymentMethod(self.payment_method),
            notes=self.notes,
            status=BookingStatus(self.status),
            operation_token=self.operation_token,
            status_updated_by=self.status_updated_by,
            created_at=self.created_at,
            updated_at=self.updated_at or self.created_at,
        )
