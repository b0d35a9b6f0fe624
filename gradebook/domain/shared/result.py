"""
일괄 작업의 건별 결과 — 한 건 실패가 나머지를 멈추지 않도록 예외 대신 값으로 모은다

예: 학생 일괄 병합은 그룹마다 Ok(MergeReport) 또는 Err 를 남긴다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    message: str
    # 보통 실패시킨 예외 클래스 이름 (MergeFailedError 등)
    code: str = "RecordDomainError"
    subject_id: str = ""


Result = Ok[T] | Err
