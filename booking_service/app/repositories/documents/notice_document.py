from __future__ import annotations

from common.mongo.types import BaseDocument, build_document_data_from_domain

from ...models.notice import Notice


class NoticeDocument(BaseDocument):
    """MongoDB notices 컬렉션 도큐먼트 모델."""

    title: str
    body: str
    created_by: str

    @classmethod
    def from_domain(cls, notice: Notice) -> "NoticeDocument":
        return cls.model_validate(build_document_data_from_domain(notice))

    def to_domain(self) -> Notice:
        return Notice(
            id=self.str_id,
            title=self.title,
            body=self.body,
            created_by=self.created_by,
            created_at=self.created_at,
        )
