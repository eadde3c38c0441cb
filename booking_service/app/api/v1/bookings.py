from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from ..deps import ActingUserId
from ..schemas.bookings import (
    BookingCreateRequest,
    BookingResponse,
    BookingStatusUpdateRequest,
)
from ..schemas.common import PaginatedResponse
from ...models.booking import BookingStatus
from ...services.ledger_service import LedgerService, get_ledger_service

router = APIRouter()


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="실린더 예약 생성",
)
def create_booking(
    body: BookingCreateRequest,
    acting_user_id: ActingUserId,
    ledger: LedgerService = Depends(get_ledger_service),
) -> BookingResponse:
    booking = ledger.create_booking(
        acting_user_id,
        payment_method=body.payment_method,
        notes=body.notes,
        operation_token=body.operation_token,
    )
    return BookingResponse.from_domain(booking)


@router.get(
    "/mine",
    response_model=PaginatedResponse[BookingResponse],
    summary="내 예약 목록 조회",
)
def list_my_bookings(
    acting_user_id: ActingUserId,
    page: int = Query(1, ge=1, description="조회할 페이지 (1부터 시작)"),
    page_size: int = Query(20, ge=1, le=100, description="페이지당 아이템 개수 (1~100)"),
    ledger: LedgerService = Depends(get_ledger_service),
) -> PaginatedResponse[BookingResponse]:
    items, total = ledger.list_user_bookings(acting_user_id, page, page_size)
    return PaginatedResponse[BookingResponse](
        items=[BookingResponse.from_domain(b) for b in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "",
    response_model=PaginatedResponse[BookingResponse],
    summary="전체 예약 목록 조회 (관리자)",
)
def list_bookings(
    acting_user_id: ActingUserId,
    booking_status: BookingStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    ledger: LedgerService = Depends(get_ledger_service),
) -> PaginatedResponse[BookingResponse]:
    items, total = ledger.list_bookings(acting_user_id, booking_status, page, page_size)
    return PaginatedResponse[BookingResponse](
        items=[BookingResponse.from_domain(b) for b in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{booking_id}", response_model=BookingResponse, summary="예약 단건 조회")
def get_booking(
    booking_id: str,
    acting_user_id: ActingUserId,
    ledger: LedgerService = Depends(get_ledger_service),
) -> BookingResponse:
    return BookingResponse.from_domain(ledger.get_booking(booking_id, acting_user_id))


@router.patch(
    "/{booking_id}/status",
    response_model=BookingResponse,
    summary="예약 승인/거절 (관리자)",
)
def update_booking_status(
    booking_id: str,
    body: BookingStatusUpdateRequest,
    acting_user_id: ActingUserId,
    ledger: LedgerService = Depends(get_ledger_service),
) -> BookingResponse:
    booking = ledger.transition_booking(
        booking_id, BookingStatus(body.status), acting_user_id
    )
    return BookingResponse.from_domain(booking)


@router.post(
    "/{booking_id}/deliver",
    response_model=BookingResponse,
    summary="배송 완료 처리 (관리자)",
)
def deliver_booking(
    booking_id: str,
    acting_user_id: ActingUserId,
    ledger: LedgerService = Depends(get_ledger_service),
) -> BookingResponse:
    return BookingResponse.from_domain(ledger.deliver_booking(booking_id, acting_user_id))
