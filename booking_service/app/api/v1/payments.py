from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..deps import ActingUserId
from ..schemas.common import PaginatedResponse
from ..schemas.payments import PaymentResponse
from ...services.payments_service import PaymentsService, get_payments_service

router = APIRouter()


@router.get(
    "/mine",
    response_model=PaginatedResponse[PaymentResponse],
    summary="내 결제 내역 조회",
)
def list_my_payments(
    acting_user_id: ActingUserId,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    service: PaymentsService = Depends(get_payments_service),
) -> PaginatedResponse[PaymentResponse]:
    items, total = service.list_user_payments(acting_user_id, page, page_size)
    return PaginatedResponse[PaymentResponse](
        items=[PaymentResponse.from_domain(p) for p in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/by-booking/{booking_id}",
    response_model=PaymentResponse,
    summary="예약별 결제 조회",
)
def get_payment_for_booking(
    booking_id: str,
    acting_user_id: ActingUserId,
    service: PaymentsService = Depends(get_payments_service),
) -> PaymentResponse:
    payment = service.get_payment_for_booking(booking_id, acting_user_id)
    return PaymentResponse.from_domain(payment)
