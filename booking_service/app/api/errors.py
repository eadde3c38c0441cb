"""도메인 예외 -> HTTP 응답 매핑.

응답 바디는 {"detail": {"code": ..., "message": ...}} 형태로 통일한다.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import ConnectionFailure, PyMongoError

from ..exceptions import (
    BookingServiceError,
    ConflictRetryExhausted,
    DuplicateOperation,
    Forbidden,
    InsufficientAllocation,
    InvalidTransition,
    NotFound,
    UpstreamUnavailable,
)


logger = logging.getLogger(__name__)


STATUS_BY_ERROR: list[tuple[type[BookingServiceError], int]] = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (InsufficientAllocation, status.HTTP_402_PAYMENT_REQUIRED),
    (ConflictRetryExhausted, status.HTTP_409_CONFLICT),
    (DuplicateOperation, status.HTTP_409_CONFLICT),
    (UpstreamUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_code_for(exc: BookingServiceError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"code": code, "message": message}},
    )


async def handle_booking_service_error(
    request: Request, exc: BookingServiceError
) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("request failed: %s", exc, extra={"path": request.url.path})
    return _error_response(status_code, exc.code, str(exc))


async def handle_store_error(request: Request, exc: PyMongoError) -> JSONResponse:
    # 트랜잭션 밖의 단순 조회/쓰기에서 발생한 저장소 장애
    if exc.timeout or isinstance(exc, ConnectionFailure):
        logger.error(
            "document store unavailable: %s", exc, extra={"path": request.url.path}
        )
        return _error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            UpstreamUnavailable.code,
            "document store unavailable",
        )
    logger.exception("document store error: %s", exc, extra={"path": request.url.path})
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "document store error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingServiceError, handle_booking_service_error)  # type: ignore[arg-type]
    app.add_exception_handler(PyMongoError, handle_store_error)  # type: ignore[arg-type]
