"""예약/할당 관련 이벤트 정의."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Self


EVENT_SOURCE = "booking-service"
EVENT_VERSION = "1.0"


class BookingEventType:
    """예약 이벤트 타입 상수."""

    BOOKING_CREATED = "booking.created"
    BOOKING_STATUS_CHANGED = "booking.status_changed"
    ALLOCATION_ADJUSTED = "allocation.adjusted"


@dataclass(slots=True)
class BookingCreatedEvent:
    """예약 생성 이벤트.

    예약이 생성되고 잔여 수량이 1 차감된 뒤(커밋 이후) 발행된다.
    """

    id: str
    type: str
    timestamp: str
    source: str
    version: str
    booking_id: str
    user_id: str
    payment_method: str
    remaining: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            timestamp=str(data["timestamp"]),
            source=str(data["source"]),
            version=str(data.get("version", EVENT_VERSION)),
            booking_id=str(data["booking_id"]),
            user_id=str(data["user_id"]),
            payment_method=str(data["payment_method"]),
            remaining=int(data["remaining"]),
        )


@dataclass(slots=True)
class BookingStatusChangedEvent:
    """예약 상태 변경 이벤트.

    관리자가 승인/거절/배송완료 처리하면 발행된다. refunded 는 거절로 1개가 복구되었는지 여부.
    """

    id: str
    type: str
    timestamp: str
    source: str
    version: str
    booking_id: str
    user_id: str
    previous_status: str
    status: str
    acting_user_id: str
    refunded: bool

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            timestamp=str(data["timestamp"]),
            source=str(data["source"]),
            version=str(data.get("version", EVENT_VERSION)),
            booking_id=str(data["booking_id"]),
            user_id=str(data["user_id"]),
            previous_status=str(data["previous_status"]),
            status=str(data["status"]),
            acting_user_id=str(data["acting_user_id"]),
            refunded=bool(data.get("refunded", False)),
        )


@dataclass(slots=True)
class AllocationAdjustedEvent:
    """관리자 할당 조정 이벤트."""

    id: str
    type: str
    timestamp: str
    source: str
    version: str
    user_id: str
    delta: int
    allocated: int
    remaining: int
    acting_user_id: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            timestamp=str(data["timestamp"]),
            source=str(data["source"]),
            version=str(data.get("version", EVENT_VERSION)),
            user_id=str(data["user_id"]),
            delta=int(data["delta"]),
            allocated=int(data["allocated"]),
            remaining=int(data["remaining"]),
            acting_user_id=str(data["acting_user_id"]),
        )
