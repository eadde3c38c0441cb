from __future__ import annotations

import pytest

from booking_service.app.config import DEFAULT_NOTIFY_SENDER, load_config


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "LEDGER_MAX_TXN_ATTEMPTS",
        "LEDGER_OPERATION_TIMEOUT_SECONDS",
        "NOTIFY_MAX_ATTEMPTS",
        "NOTIFY_SENDER",
    ):
        monkeypatch.delenv(name, raising=False)

    config = load_config()

    assert config.ledger.max_txn_attempts == 5
    assert config.ledger.operation_timeout_seconds == 5.0
    assert config.notification.max_attempts == 2
    assert config.notification.sender == DEFAULT_NOTIFY_SENDER


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEDGER_MAX_TXN_ATTEMPTS", "8")
    monkeypatch.setenv("LEDGER_OPERATION_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("NOTIFY_SENDER", "desk@agency.test")

    config = load_config()

    assert config.ledger.max_txn_attempts == 8
    assert config.ledger.operation_timeout_seconds == 2.5
    assert config.notification.sender == "desk@agency.test"


@pytest.mark.parametrize("value", ["zero", "0", "-2"])
def test_invalid_attempts_fail_fast(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("LEDGER_MAX_TXN_ATTEMPTS", value)

    with pytest.raises(RuntimeError):
        load_config()
