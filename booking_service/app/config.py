from __future__ import annotations

import os
from dataclasses import dataclass


LEDGER_MAX_TXN_ATTEMPTS = "LEDGER_MAX_TXN_ATTEMPTS"
LEDGER_OPERATION_TIMEOUT_SECONDS = "LEDGER_OPERATION_TIMEOUT_SECONDS"
NOTIFY_MAX_ATTEMPTS = "NOTIFY_MAX_ATTEMPTS"
NOTIFY_SENDER = "NOTIFY_SENDER"

DEFAULT_NOTIFY_SENDER = "noreply@gas-agency.local"


@dataclass(slots=True)
class LedgerConfig:
    """할당 카운터 트랜잭션 설정.

    - max_txn_attempts: 쓰기 충돌 시 전체 트랜잭션을 다시 시도하는 최대 횟수
    - operation_timeout_seconds: 트랜잭션 1회 시도에 허용하는 최대 시간
    """

    max_txn_attempts: int = 5
    operation_timeout_seconds: float = 5.0


@dataclass(slots=True)
class NotificationConfig:
    max_attempts: int = 2
    sender: str = DEFAULT_NOTIFY_SENDER


@dataclass(slots=True)
class AppConfig:
    """booking-service 전체 설정 루트."""

    ledger: LedgerConfig
    notification: NotificationConfig


def _read_positive_int(name: str, default: int) -> int:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        value = int(raw_value)
    except ValueError as exc:  # noqa: TRY003
        raise RuntimeError(
            f"{name} must be an integer value, got: {raw_value!r}"
        ) from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got: {value}")
    return value


def _read_positive_float(name: str, default: float) -> float:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        value = float(raw_value)
    except ValueError as exc:  # noqa: TRY003
        raise RuntimeError(f"{name} must be a number, got: {raw_value!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got: {value}")
    return value


def load_ledger_config() -> LedgerConfig:
    return LedgerConfig(
        max_txn_attempts=_read_positive_int(LEDGER_MAX_TXN_ATTEMPTS, 5),
        operation_timeout_seconds=_read_positive_float(
            LEDGER_OPERATION_TIMEOUT_SECONDS, 5.0
        ),
    )


def load_notification_config() -> NotificationConfig:
    sender = os.getenv(NOTIFY_SENDER, "").strip() or DEFAULT_NOTIFY_SENDER
    return NotificationConfig(
        max_attempts=_read_positive_int(NOTIFY_MAX_ATTEMPTS, 2),
        sender=sender,
    )


def load_config() -> AppConfig:
    """booking-service 설정을 환경 변수에서 로드하여 AppConfig 로 반환한다."""

    return AppConfig(
        ledger=load_ledger_config(),
        notification=load_notification_config(),
    )
