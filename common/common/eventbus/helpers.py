from __future__ import annotations

import time
from typing import Any, Mapping

from .core import Event


def new_json_event(
    payload: Mapping[str, Any],
    *,
    event_id: str | None = None,
    key: str | None = None,
) -> Event:
    """dict 페이로드를 Event 로 감싼다.

    - id가 비어 있으면 고해상도 타임스탬프 기반 문자열을 생성한다.
    - key 는 파티셔닝 기준(예: user_id)이며, 없으면 이벤트 id 를 사용한다.
    """
    if not event_id:
        event_id = str(time.time_ns())

    return Event(id=event_id, payload=dict(payload), key=key)
