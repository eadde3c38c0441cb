from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from common.models.user import SessionInput

from ..deps import ActingUserId
from ..schemas.common import PaginatedResponse
from ..schemas.users import (
    AllocationAdjustRequest,
    AllocationTransactionResponse,
    ProfileUpdateRequest,
    SessionRequest,
    UserProfileResponse,
)
from ...services.ledger_service import LedgerService, get_ledger_service
from ...services.users_service import UsersService, get_users_service

router = APIRouter()


@router.post("/session", response_model=UserProfileResponse, summary="세션 시작 (프로필 확인/생성)")
def start_session(
    body: SessionRequest,
    service: UsersService = Depends(get_users_service),
) -> UserProfileResponse:
    user = service.resolve_session(SessionInput(**body.model_dump()))
    return UserProfileResponse.from_domain(user)


@router.get("/me", response_model=UserProfileResponse, summary="내 프로필 조회")
def get_my_profile(
    acting_user_id: ActingUserId,
    service: UsersService = Depends(get_users_service),
) -> UserProfileResponse:
    return UserProfileResponse.from_domain(service.get_profile(acting_user_id))


@router.put("/me", response_model=UserProfileResponse, summary="내 연락처 정보 수정")
def update_my_profile(
    body: ProfileUpdateRequest,
    acting_user_id: ActingUserId,
    service: UsersService = Depends(get_users_service),
) -> UserProfileResponse:
    user = service.update_profile(
        acting_user_id, name=body.name, phone=body.phone, address=body.address
    )
    return UserProfileResponse.from_domain(user)


@router.get(
    "",
    response_model=PaginatedResponse[UserProfileResponse],
    summary="유저 목록 조회 (관리자)",
)
def list_users(
    acting_user_id: ActingUserId,
    page: int = Query(1, ge=1, description="조회할 페이지 (1부터 시작)"),
    page_size: int = Query(20, ge=1, le=100, description="페이지당 아이템 개수 (1~100)"),
    service: UsersService = Depends(get_users_service),
) -> PaginatedResponse[UserProfileResponse]:
    users, total = service.list_users(acting_user_id, page, page_size)
    return PaginatedResponse[UserProfileResponse](
        items=[UserProfileResponse.from_domain(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "/{user_id}/allocation",
    response_model=UserProfileResponse,
    summary="할당 수량 조정 (관리자, +1/-1)",
)
def adjust_allocation(
    user_id: str,
    body: AllocationAdjustRequest,
    acting_user_id: ActingUserId,
    ledger: LedgerService = Depends(get_ledger_service),
) -> UserProfileResponse:
    user = ledger.adjust_allocation(user_id, body.delta, acting_user_id)
    return UserProfileResponse.from_domain(user)


@router.get(
    "/{user_id}/allocation/history",
    response_model=PaginatedResponse[AllocationTransactionResponse],
    summary="할당 원장 이력 조회",
)
def get_allocation_history(
    user_id: str,
    acting_user_id: ActingUserId,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    ledger: LedgerService = Depends(get_ledger_service),
) -> PaginatedResponse[AllocationTransactionResponse]:
    items, total = ledger.get_allocation_history(
        user_id, acting_user_id, page, page_size
    )
    return PaginatedResponse[AllocationTransactionResponse](
        items=[AllocationTransactionResponse.from_domain(tx) for tx in items],
        total=total,
        page=page,
        page_size=page_size,
    )
