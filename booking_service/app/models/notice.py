from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Notice(BaseModel):
    """대리점 공지. 생성 후에는 수정하지 않고, 어느 관리자든 삭제할 수 있다."""

    id: str | None = None
    title: str
    body: str
    created_by: str
    created_at: datetime
