"""
학생 병합 시 답안 충돌 해결 정책

충돌 = 대상(target)과 원본(source)이 같은 (시험, 문항) 에 각각 답안을 가진 경우.
정책은 (target_answer, source_answer) → 살아남을 답안 을 돌려주는 함수.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from gradebook.domain.records.entities import Answer
from gradebook.domain.records.errors import InvalidArgumentError

MergePolicy = Callable[[Answer, Answer], Answer]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def keep_target(target: Answer, source: Answer) -> Answer:
    """기존 자리 주인(대상 학생)이 이긴다. 기본값."""
    return target


def keep_most_recent(target: Answer, source: Answer) -> Answer:
    """updated_at 이 더 늦은 쪽. 같으면 대상."""
    t = _aware(target.updated_at)
    s = _aware(source.updated_at)
    return source if s > t else target


def keep_highest_score(target: Answer, source: Answer) -> Answer:
    """score_received 가 더 높은 쪽 (None 은 최저). 같으면 대상."""
    t = target.score_received
    s = source.score_received
    if s is not None and (t is None or s > t):
        return source
    return target


def _aware(value: datetime | None) -> datetime:
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


MERGE_POLICIES: dict[str, MergePolicy] = {
    "keep_target": keep_target,
    "keep_most_recent": keep_most_recent,
    "keep_highest_score": keep_highest_score,
}


def get_merge_policy(name: str) -> MergePolicy:
    try:
        return MERGE_POLICIES[name]
    except KeyError:
        raise InvalidArgumentError(
            f"unknown merge policy: {name!r} (choose from {', '.join(MERGE_POLICIES)})"
        ) from None
