from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from ..deps import ActingUserId
from ..schemas.notices import ListNoticesResponse, NoticeCreateRequest, NoticeResponse
from ...services.notices_service import NoticesService, get_notices_service

router = APIRouter()


@router.get("", response_model=ListNoticesResponse, summary="공지 목록 조회 (최신순)")
def list_notices(
    limit: int | None = Query(None, ge=1, description="최대 개수 (없으면 전체)"),
    service: NoticesService = Depends(get_notices_service),
) -> ListNoticesResponse:
    notices = service.list_notices(limit)
    return ListNoticesResponse(items=[NoticeResponse.from_domain(n) for n in notices])


@router.post(
    "",
    response_model=NoticeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="공지 등록 (관리자)",
)
def create_notice(
    body: NoticeCreateRequest,
    acting_user_id: ActingUserId,
    service: NoticesService = Depends(get_notices_service),
) -> NoticeResponse:
    notice = service.create_notice(body.title, body.body, acting_user_id)
    return NoticeResponse.from_domain(notice)


@router.delete("/{notice_id}", summary="공지 삭제 (관리자)")
def delete_notice(
    notice_id: str,
    acting_user_id: ActingUserId,
    service: NoticesService = Depends(get_notices_service),
) -> dict[str, str]:
    service.delete_notice(notice_id, acting_user_id)
    return {"message": "notice_deleted"}
