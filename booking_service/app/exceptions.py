from __future__ import annotations


class BookingServiceError(Exception):
    """Base exception for all booking-service errors.

    ``code`` is the stable machine-readable kind surfaced to API callers.
    """

    code = "booking_service_error"


class NotFound(BookingServiceError):
    """Referenced user/booking/notice does not exist."""

    code = "not_found"


class UserNotFound(NotFound):
    code = "user_not_found"

    def __init__(self, user_id: str) -> None:
        super().__init__(f"user profile not found: {user_id}")
        self.user_id = user_id


class BookingNotFound(NotFound):
    code = "booking_not_found"

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"booking not found: {booking_id}")
        self.booking_id = booking_id


class NoticeNotFound(NotFound):
    code = "notice_not_found"

    def __init__(self, notice_id: str) -> None:
        super().__init__(f"notice not found: {notice_id}")
        self.notice_id = notice_id


class Forbidden(BookingServiceError):
    """Acting user lacks the role (or ownership) required for the operation."""

    code = "forbidden"


class InvalidTransition(BookingServiceError):
    """Booking state machine violation (e.g. rejecting an approved booking)."""

    code = "invalid_transition"

    def __init__(self, booking_id: str, current: str, requested: str) -> None:
        super().__init__(
            f"booking {booking_id} cannot move from {current!r} to {requested!r}"
        )
        self.booking_id = booking_id
        self.current = current
        self.requested = requested


class InsufficientAllocation(BookingServiceError):
    """No cylinders remaining in the user's allocation."""

    code = "insufficient_allocation"

    def __init__(self, user_id: str) -> None:
        super().__init__(f"no cylinders remaining for user {user_id}")
        self.user_id = user_id


class ConflictRetryExhausted(BookingServiceError):
    """Atomic counter update could not be committed within the retry budget."""

    code = "conflict_retry_exhausted"


class UpstreamUnavailable(BookingServiceError):
    """Document store unreachable or timed out."""

    code = "upstream_unavailable"


class DuplicateOperation(BookingServiceError):
    """A booking with the same operation token was committed concurrently."""

    code = "duplicate_operation"

    def __init__(self, user_id: str, operation_token: str) -> None:
        super().__init__(
            f"operation token already used (user_id={user_id}, token={operation_token})"
        )
        self.user_id = user_id
        self.operation_token = operation_token
