"""MongoDB 멀티 도큐먼트 트랜잭션 실행기.

할당 카운터를 바꾸는 모든 쓰기(예약 생성, 거절 환불, 관리자 조정)는 이 실행기를 거친다.
- 같은 유저 도큐먼트를 동시에 수정하면 한쪽이 TransientTransactionError 로 실패하고, 콜백 전체를 다시 실행한다.
- 재시도 횟수와 1회 시도 시간은 모두 제한되어 있으며, 초과 시 부분 반영 없이 예외로 끝난다.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import pymongo
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from ..exceptions import ConflictRetryExhausted, UpstreamUnavailable
from .interfaces import TransactionRunnerInterface


T = TypeVar("T")

TRANSIENT_TRANSACTION_ERROR = "TransientTransactionError"
UNKNOWN_COMMIT_RESULT = "UnknownTransactionCommitResult"


class MongoTransactionRunner(TransactionRunnerInterface):
    def __init__(
        self,
        client: MongoClient,
        *,
        max_attempts: int = 5,
        timeout_seconds: float = 5.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._max_attempts = max(1, max_attempts)
        self._timeout_seconds = timeout_seconds
        self._logger = logger or logging.getLogger(__name__)

    def run(self, callback: Callable[[Any], T]) -> T:
        with self._client.start_session() as session:
            for attempt in range(1, self._max_attempts + 1):
                try:
                    with pymongo.timeout(self._timeout_seconds):
                        return self._run_once(session, callback)
                except PyMongoError as exc:
                    if exc.has_error_label(TRANSIENT_TRANSACTION_ERROR):
                        if attempt < self._max_attempts:
                            self._logger.warning(
                                "transaction conflict, retrying (%d/%d): %s",
                                attempt,
                                self._max_attempts,
                                exc,
                                extra={"attempt": attempt},
                            )
                            continue
                        raise ConflictRetryExhausted(
                            f"transaction not committed after {attempt} attempts"
                        ) from exc
                    if exc.timeout or isinstance(exc, ConnectionFailure):
                        raise UpstreamUnavailable(
                            f"document store unavailable: {exc}"
                        ) from exc
                    raise

        # max_attempts >= 1 이므로 루프는 반드시 return 또는 raise 로 끝난다.
        raise AssertionError("unreachable")

    def _run_once(self, session: Any, callback: Callable[[Any], T]) -> T:
        session.start_transaction(
            read_concern=ReadConcern("snapshot"),
            write_concern=WriteConcern("majority"),
        )
        try:
            result = callback(session)
        except BaseException:
            if session.in_transaction:
                session.abort_transaction()
            raise

        self._commit(session)
        return result

    def _commit(self, session: Any) -> None:
        # 커밋은 재실행해도 안전하므로, 결과를 알 수 없는 경우에는 커밋만 다시 시도한다.
        for attempt in range(1, self._max_attempts + 1):
            try:
                session.commit_transaction()
                return
            except PyMongoError as exc:
                if (
                    exc.has_error_label(UNKNOWN_COMMIT_RESULT)
                    and attempt < self._max_attempts
                ):
                    self._logger.warning(
                        "unknown commit result, retrying commit (%d/%d)",
                        attempt,
                        self._max_attempts,
                        extra={"attempt": attempt},
                    )
                    continue
                raise
