from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict
from typing import Optional

from confluent_kafka import Producer

from .config import get_brokers, get_message_max_bytes
from .core import Event

logger = logging.getLogger(__name__)


class KafkaEventBus:
    """Kafka 기반 EventBus 구현 (발행 전용).

    produce 는 로컬 버퍼에 적재만 하고 즉시 반환하며, 전송 실패는 delivery 콜백에서 로그로 남긴다.
    """

    def __init__(self, brokers: str, *, message_max_bytes: int | None = None) -> None:
        conf: dict[str, object] = {"bootstrap.servers": brokers}
        if message_max_bytes is not None:
            conf["message.max.bytes"] = message_max_bytes
        self._producer = Producer(conf)
        self._brokers = brokers

    def close(self, timeout: float = 5.0) -> None:
        self._producer.flush(timeout)

    def publish(self, topic: str, event: Event) -> None:
        payload = json.dumps(asdict(event), ensure_ascii=False, default=str).encode(
            "utf-8"
        )

        def _delivery_callback(err, msg) -> None:  # type: ignore[no-untyped-def]
            if err is not None:
                logger.error("failed to deliver message to %s: %s", msg.topic(), err)

        self._producer.produce(
            topic=topic,
            value=payload,
            key=(event.key or event.id).encode("utf-8"),
            callback=_delivery_callback,
        )
        self._producer.poll(0)


_bus: Optional[KafkaEventBus] = None
_lock = threading.Lock()


def get_kafka_event_bus() -> KafkaEventBus:
    """전역 KafkaEventBus 싱글톤을 반환한다. 브로커 설정이 없으면 RuntimeError."""

    global _bus

    if _bus is not None:
        return _bus

    with _lock:
        if _bus is None:
            _bus = KafkaEventBus(
                get_brokers(), message_max_bytes=get_message_max_bytes()
            )
            logger.info("Kafka producer initialized")
    return _bus


def close_kafka_event_bus() -> None:
    """애플리케이션 종료 시 버퍼에 남은 메시지를 flush 한다."""

    global _bus

    with _lock:
        if _bus is not None:
            _bus.close()
            _bus = None
