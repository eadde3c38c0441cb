"""예약 알림 메일 발송.

알림은 부가 기능이다. 발송 실패는 로그로만 남기고 호출한 작업(예약 생성/상태 변경)을 실패시키지 않는다.
재시도는 즉시 재시도 몇 회로 제한한다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from ..config import NotificationConfig, load_notification_config


@dataclass(slots=True)
class EmailMessage:
    sender: str
    to: str
    subject: str
    body: str


class EmailSenderInterface(Protocol):
    def send(self, message: EmailMessage) -> None:  # pragma: no cover - Protocol
        """발송 실패 시 예외를 던진다."""
        ...


class LoggingEmailSender(EmailSenderInterface):
    """실제 메일 서버 없이 발송 내용을 로그로만 남기는 sender."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def send(self, message: EmailMessage) -> None:
        self._logger.info(
            "email sent (to=%s, subject=%s)", message.to, message.subject
        )


class Notifier:
    """예약/할당 관련 메일을 만들어 best-effort 로 발송한다."""

    def __init__(
        self,
        sender: EmailSenderInterface,
        config: NotificationConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._sender = sender
        self._config = config or NotificationConfig()
        self._logger = logger or logging.getLogger(__name__)

    def send(self, to: str, subject: str, body: str) -> bool:
        """발송 성공 여부를 반환한다. 어떤 경우에도 예외를 던지지 않는다."""

        if not to:
            self._logger.info("skip notification without recipient (subject=%s)", subject)
            return False

        message = EmailMessage(
            sender=self._config.sender, to=to, subject=subject, body=body
        )
        for attempt in range(1, self._config.max_attempts + 1):
            try:
                self._sender.send(message)
                return True
            except Exception as exc:  # noqa: BLE001
                self._logger.warning(
                    "failed to send notification (%d/%d) to=%s: %s",
                    attempt,
                    self._config.max_attempts,
                    to,
                    exc,
                    extra={"attempt": attempt},
                )

        self._logger.error("giving up notification to=%s subject=%s", to, subject)
        return False

    def booking_confirmation(self, to: str, user_name: str, booking_id: str) -> bool:
        return self.send(
            to,
            "Gas Cylinder Booking Confirmation",
            (
                f"Dear {user_name},\n\n"
                f"Your gas cylinder booking (ID: {booking_id}) has been received "
                "and is being processed.\n\n"
                "You will receive another email once your booking is approved.\n\n"
                "Regards,\nGas Agency Team"
            ),
        )

    def booking_status_update(
        self, to: str, user_name: str, booking_id: str, status: str
    ) -> bool:
        if status == "approved":
            detail = (
                "Your cylinder will be delivered soon. Please keep the payment "
                "ready as per your selected payment method."
            )
        elif status == "delivered":
            detail = "Your cylinder has been delivered. Thank you for your order."
        else:
            detail = "If you have any questions, please contact our customer support."

        return self.send(
            to,
            f"Gas Cylinder Booking {status.capitalize()}",
            (
                f"Dear {user_name},\n\n"
                f"Your gas cylinder booking (ID: {booking_id}) has been {status}.\n\n"
                f"{detail}\n\n"
                "Regards,\nGas Agency Team"
            ),
        )

    def account_balance(self, to: str, user_name: str, remaining: int) -> bool:
        return self.send(
            to,
            "Gas Cylinder Account Balance",
            (
                f"Dear {user_name},\n\n"
                f"You have {remaining} gas cylinders remaining in your account "
                "for this year.\n\n"
                "Regards,\nGas Agency Team"
            ),
        )


def get_notifier() -> Notifier:
    """FastAPI DI용 Notifier 팩토리."""

    config = load_notification_config()
    return Notifier(sender=LoggingEmailSender(), config=config)
