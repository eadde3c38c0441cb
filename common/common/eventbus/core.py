from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(slots=True)
class Event:
    """Kafka 메시지의 메타데이터와 페이로드를 표현하는 이벤트.

    payload는 직렬화 직전/직후 형태(예: dict)를 저장하는 용도로 사용하고,
    실제 Kafka I/O 레이어에서 JSON 인코딩/디코딩을 담당한다.
    """

    id: str
    payload: Any
    key: str | None = None


@dataclass(frozen=True, slots=True)
class Topic:
    base: str


class EventBus(Protocol):
    """이벤트 발행 계약. 서비스는 Kafka 구현을 직접 알지 않는다."""

    def publish(self, topic: str, event: Event) -> None:  # pragma: no cover - Protocol
        ...
