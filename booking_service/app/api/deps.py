from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from common.middleware.request_trace import USER_ID_HEADER


def get_acting_user_id(
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> str:
    """Gateway 가 인증 후 전달한 identity id.

    role 은 여기서 판단하지 않는다. 권한이 필요한 작업은 서비스가 저장소의 프로필로 다시 확인한다.
    """

    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "unauthenticated",
                "message": f"{USER_ID_HEADER} header is required",
            },
        )
    return x_user_id.strip()


ActingUserId = Annotated[str, Depends(get_acting_user_id)]
