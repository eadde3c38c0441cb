from __future__ import annotations

import logging
import threading
from typing import Optional

from pymongo import ASCENDING, DESCENDING, IndexModel, MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError, PyMongoError

from .config import get_mongo_db_name, get_mongo_timeout_ms, get_mongo_uri


logger = logging.getLogger(__name__)


_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    """전역 MongoClient 싱글톤을 반환한다.

    - MONGO_URI 에서 URI 를 읽어온다.
    - MONGO_TIMEOUT_MS 를 timeoutMS 로 설정해 모든 연산이 무기한 대기하지 않도록 한다.
    - ping 으로 연결을 검증한다. 연결 실패는 PyMongoError 그대로 올려 호출 측이 저장소 장애로 처리하게 한다.
    - URI 에 기본 데이터베이스가 포함되어 있지 않으면 에러를 발생시킨다.
    - 컬렉션과 인덱스를 한 번만 생성한다. (트랜잭션 안에서는 컬렉션을 암묵적으로 만들 수 없다)
    - 인덱스 생성까지 성공한 경우에만 싱글톤을 등록하고, 실패하면 다음 호출에서 다시 시도한다.
    """

    global _client, _db

    if _client is not None:
        return _client

    with _lock:
        if _client is not None:
            return _client

        uri = get_mongo_uri()
        client: MongoClient = MongoClient(uri, timeoutMS=get_mongo_timeout_ms())

        try:
            client.admin.command("ping")
        except PyMongoError as exc:
            client.close()
            logger.error("failed to connect to MongoDB: %s", exc)
            raise

        db_name = get_mongo_db_name()
        try:
            if db_name:
                db = client[db_name]
            else:
                db = client.get_default_database()
        except ConfigurationError as exc:
            client.close()
            raise RuntimeError(
                "MongoDB database name must be specified via MONGO_DB_NAME or in MONGO_URI (mongodb://.../db_name)",
            ) from exc

        try:
            _ensure_indexes(db)
        except PyMongoError as exc:
            client.close()
            logger.error("failed to ensure MongoDB indexes: %s", exc)
            raise

        _client = client
        _db = db
        logger.info("MongoDB connected and indexes ensured (db=%s)", db.name)
        return _client


def get_database() -> Database:
    """전역 기본 Database 객체를 반환한다."""

    global _db

    if _db is None:
        get_client()
    assert (
        _db is not None
    )  # get_client 에서 _db 를 초기화하지 못했다면 예외가 이미 발생했어야 한다.
    return _db


def _ensure_indexes(db: Database) -> None:
    """필수 인덱스를 생성한다.

    중복 생성해도 MongoDB 가 처리하므로 idempotent 하다.
    """

    db["users"].create_indexes(
        [
            IndexModel([("user_id", ASCENDING)], name="uniq_user_id", unique=True),
            IndexModel([("created_at", DESCENDING)], name="idx_created_at_desc"),
        ]
    )

    db["bookings"].create_indexes(
        [
            IndexModel(
                [("user_id", ASCENDING), ("created_at", DESCENDING)],
                name="idx_user_created_at",
            ),
            IndexModel(
                [("status", ASCENDING), ("created_at", DESCENDING)],
                name="idx_status_created_at",
            ),
            # 같은 operation_token 으로 재시도된 예약은 한 번만 생성된다.
            IndexModel(
                [("user_id", ASCENDING), ("operation_token", ASCENDING)],
                name="uniq_user_operation_token",
                unique=True,
                partialFilterExpression={"operation_token": {"$type": "string"}},
            ),
        ]
    )

    db["notices"].create_indexes(
        [IndexModel([("created_at", DESCENDING)], name="idx_created_at_desc")]
    )

    db["payments"].create_indexes(
        [
            IndexModel(
                [("user_id", ASCENDING), ("created_at", DESCENDING)],
                name="idx_user_created_at",
            ),
            IndexModel([("booking_id", ASCENDING)], name="idx_booking_id"),
        ]
    )

    db["allocation_transactions"].create_indexes(
        [
            IndexModel(
                [("user_id", ASCENDING), ("created_at", DESCENDING)],
                name="idx_user_created_at",
            )
        ]
    )
