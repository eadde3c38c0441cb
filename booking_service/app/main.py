from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from common.eventbus.kafka import close_kafka_event_bus
from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware

from .api.errors import register_exception_handlers
from .api.health import router as health_router
from .api.v1 import api_router
from .config import load_config


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - framework hook
    yield
    close_kafka_event_bus()


def create_app() -> FastAPI:
    setup_logger(name="booking-service")
    # 잘못된 환경 변수는 첫 요청이 아니라 기동 시점에 실패시킨다.
    config = load_config()
    app = FastAPI(
        title="Gas Booking Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config

    # 공통 Request/Span ID 로그 미들웨어
    app.add_middleware(RequestTraceMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


def main() -> None:
    import uvicorn

    port = int(os.getenv("BOOKING_SERVICE_PORT", "8003"))
    uvicorn.run(
        "booking_service.app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
