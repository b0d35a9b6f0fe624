"""
도메인 공통: ID 생성 (외부 라이브러리 없음)
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """레코드 식별자. 저장소 전역에서 유일하면 충분 (형식 무관)."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
