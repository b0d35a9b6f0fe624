"""
등수 부여 — 공동 순위 (competition ranking)

정렬: total_score 내림차순, 동점은 입력 순서 유지 (안정 정렬).
등수: 직전과 점수가 같으면 같은 등수, 다르면 1부터 센 위치.
  [90, 90, 80]     → [1, 1, 3]
  [90, 80, 80, 70] → [1, 2, 2, 4]
"""
from __future__ import annotations

from typing import Iterable

from gradebook.domain.scoring.result import ExamResult


def assign_ranks(results: Iterable[ExamResult]) -> list[ExamResult]:
    """정렬된 새 리스트 반환. 각 결과의 rank/total_students 는 제자리 갱신."""
    ranked = sorted(results, key=lambda r: r.total_score, reverse=True)
    total = len(ranked)

    current_rank = 1
    for index, result in enumerate(ranked):
        if index > 0 and ranked[index - 1].total_score != result.total_score:
            current_rank = index + 1
        result.rank = current_rank
        result.total_students = total

    return ranked
