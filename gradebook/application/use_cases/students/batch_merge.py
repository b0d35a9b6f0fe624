"""
중복 학생 일괄 병합 (운영자용)

그룹마다 답안이 가장 많은 학생을 대상으로 자동 선택 (동률은 먼저 나온 학생),
나머지를 차례로 병합한 뒤 답안 없는 학생(병합 잔여물)을 정리한다.
병합 1건 실패는 기록만 하고 다음 병합으로 진행.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from gradebook.application.ports.unit_of_work import UnitOfWork
from gradebook.application.use_cases.answers.cleanup import AnswerDeduplicator
from gradebook.application.use_cases.students.identity import (
    MergeReport,
    StudentIdentityResolver,
)
from gradebook.application.use_cases.students.merge_policy import MergePolicy
from gradebook.domain.records.entities import Student
from gradebook.domain.records.errors import RecordDomainError
from gradebook.domain.shared.result import Err, Ok, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeCandidate:
    student: Student
    answer_count: int
    exam_count: int


@dataclass(frozen=True)
class MergePlan:
    target: MergeCandidate
    sources: tuple[MergeCandidate, ...]

    @property
    def total_students(self) -> int:
        return 1 + len(self.sources)


@dataclass
class BatchMergeReport:
    plans: list[MergePlan] = field(default_factory=list)
    merges: list[Result[MergeReport]] = field(default_factory=list)
    removed_students: int = 0

    @property
    def succeeded(self) -> int:
        return sum(1 for m in self.merges if isinstance(m, Ok))

    @property
    def failed(self) -> int:
        return sum(1 for m in self.merges if isinstance(m, Err))


def plan_merges(uow: UnitOfWork) -> list[MergePlan]:
    groups = StudentIdentityResolver(uow).find_duplicate_groups()
    if not groups:
        return []

    answers = uow.answers.list_all()
    answer_counts = Counter(a.student_id for a in answers)
    exams_by_student: dict[str, set[str]] = {}
    for a in answers:
        exams_by_student.setdefault(a.student_id, set()).add(a.exam_id)

    plans: list[MergePlan] = []
    for group in groups:
        candidates = [
            MergeCandidate(
                student=s,
                answer_count=answer_counts.get(s.id, 0),
                exam_count=len(exams_by_student.get(s.id, ())),
            )
            for s in group
        ]
        # 안정 정렬: 동률이면 먼저 나온 학생이 대상
        candidates.sort(key=lambda c: c.answer_count, reverse=True)
        plans.append(MergePlan(target=candidates[0], sources=tuple(candidates[1:])))
    return plans


def merge_duplicate_groups(
    uow: UnitOfWork,
    policy: Optional[MergePolicy] = None,
    dry_run: bool = False,
) -> BatchMergeReport:
    report = BatchMergeReport(plans=plan_merges(uow))
    if dry_run or not report.plans:
        return report

    resolver = StudentIdentityResolver(uow, policy=policy)
    for index, plan in enumerate(report.plans, start=1):
        target = plan.target.student
        for source in plan.sources:
            try:
                merged = resolver.merge(target.id, source.student.id)
            except RecordDomainError as e:
                logger.warning(
                    "batch merge failed group=%s target=%s source=%s: %s",
                    index,
                    target.id,
                    source.student.id,
                    e,
                )
                report.merges.append(
                    Err(message=str(e), code=type(e).__name__, subject_id=source.student.id)
                )
                continue
            report.merges.append(Ok(merged))

    report.removed_students = AnswerDeduplicator(uow).remove_students_with_no_answers()
    logger.info(
        "batch merge done groups=%s succeeded=%s failed=%s removed_students=%s",
        len(report.plans),
        report.succeeded,
        report.failed,
        report.removed_students,
    )
    return report
