from __future__ import annotations

from pydantic import BaseModel, Field

from common.types.datetime import UtcDateTime

from ...models.notice import Notice


class NoticeCreateRequest(BaseModel):
    title: str = Field(min_length=2, max_length=200)
    body: str = Field(min_length=5)


class NoticeResponse(BaseModel):
    id: str | None
    title: str
    body: str
    created_by: str
    created_at: UtcDateTime

    @classmethod
    def from_domain(cls, notice: Notice) -> "NoticeResponse":
        return cls(
            id=notice.id,
            title=notice.title,
            body=notice.body,
            created_by=notice.created_by,
            created_at=notice.created_at,
        )


class ListNoticesResponse(BaseModel):
    items: list[NoticeResponse]
