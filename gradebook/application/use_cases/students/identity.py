"""
학생 식별 Use Case — 중복 학생 방지/탐지/병합 (Django 미사용)

- find_by_name: 원문 완전 일치 우선, 없으면 정규화 키 일치
  (의도적으로 다르게 적은 학교명은 원문 일치로 보존, 공백/"고등학교" 흔들림은 정규화로 흡수)
- find_duplicate_groups: 정규화 키가 같은 학생 묶음 (2명 이상)
- merge: source 답안을 target으로 이전 후 source 삭제. 한 트랜잭션.

병합은 동시 실행에 안전하지 않다. 겹치는 학생을 건드리는 병합은 호출자가 직렬화할 것.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from gradebook.application.ports.unit_of_work import UnitOfWork
from gradebook.application.use_cases.students.merge_policy import (
    MergePolicy,
    get_merge_policy,
)
from gradebook.config import DEFAULT_ORGANIZATION, MERGE_POLICY
from gradebook.domain.records.entities import Answer, Student
from gradebook.domain.records.errors import (
    InvalidArgumentError,
    MergeFailedError,
    RecordDomainError,
    RecordNotFoundError,
)
from gradebook.domain.shared.ids import utc_now
from libs.identity_util import identity_key

logger = logging.getLogger(__name__)

# 병합 중 버려진 답안 감사 로그
audit_logger = logging.getLogger("gradebook.merge")


@dataclass(frozen=True)
class DiscardedAnswer:
    kept_answer_id: str
    discarded_answer_id: str
    exam_id: str
    question_id: str


@dataclass
class MergeReport:
    target_id: str
    source_id: str
    moved: int = 0
    discarded: list[DiscardedAnswer] = field(default_factory=list)


class StudentIdentityResolver:
    def __init__(self, uow: UnitOfWork, policy: Optional[MergePolicy] = None) -> None:
        self._uow = uow
        self._policy = policy

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def find_by_name(self, name: str, school: str, grade: str) -> Optional[Student]:
        exact = self._uow.students.find_exact(name or "", school or "", grade or "")
        if exact is not None:
            return exact

        key = identity_key(name, school, grade)
        for s in self._uow.students.list_all():
            if identity_key(s.name, s.school, s.grade) == key:
                return s
        return None

    def find_or_create(
        self,
        name: str,
        school: str,
        grade: str,
        organization: str = DEFAULT_ORGANIZATION,
    ) -> tuple[Student, bool]:
        """첫 답안/명단 입력 시 학생을 지연 생성. (student, created) 반환."""
        found = self.find_by_name(name, school, grade)
        if found is not None:
            return found, False

        student = Student(
            name=(name or "").strip(),
            school=(school or "").strip(),
            grade=(grade or "").strip(),
            organization=organization,
        )
        with self._uow as uow:
            uow.students.save(student)
        logger.info("student created id=%s name=%r school=%r grade=%r", student.id, student.name, student.school, student.grade)
        return student, True

    def find_duplicate_groups(self) -> list[list[Student]]:
        groups: dict[str, list[Student]] = {}
        for s in self._uow.students.list_all():
            groups.setdefault(identity_key(s.name, s.school, s.grade), []).append(s)
        return [g for g in groups.values() if len(g) > 1]

    # ------------------------------------------------------------------
    # 병합
    # ------------------------------------------------------------------
    def merge(
        self,
        target_id: str,
        source_id: str,
        policy: Optional[MergePolicy] = None,
    ) -> MergeReport:
        """
        source 학생을 target 으로 병합.

        같은 (시험, 문항) 답안이 양쪽에 있으면 정책이 고른 쪽만 남는다 (기본: target).
        버려진 답안은 gradebook.merge 로거에 WARNING 으로 남긴다.

        Raises:
            InvalidArgumentError: target_id == source_id
            RecordNotFoundError: 학생 없음
            MergeFailedError: 저장소 오류 (전체 롤백됨)
        """
        if target_id == source_id:
            raise InvalidArgumentError("같은 학생은 병합할 수 없습니다.")

        resolve = policy or self._policy or get_merge_policy(MERGE_POLICY)
        report = MergeReport(target_id=target_id, source_id=source_id)

        try:
            with self._uow as uow:
                if uow.students.get_for_update(target_id) is None:
                    raise RecordNotFoundError(f"target student not found: {target_id}")
                if uow.students.get_for_update(source_id) is None:
                    raise RecordNotFoundError(f"source student not found: {source_id}")

                slots: dict[tuple[str, str], Answer] = {
                    (a.exam_id, a.question_id): a
                    for a in uow.answers.list_for_student(target_id)
                }

                for answer in uow.answers.list_for_student(source_id):
                    key = (answer.exam_id, answer.question_id)
                    existing = slots.get(key)

                    if existing is None:
                        self._reown(uow, answer, target_id)
                        slots[key] = answer
                        report.moved += 1
                        continue

                    survivor = resolve(existing, answer)
                    if survivor.id == answer.id:
                        uow.answers.delete(existing.id)
                        self._reown(uow, answer, target_id)
                        slots[key] = answer
                        report.moved += 1
                        loser, winner = existing, answer
                    else:
                        uow.answers.delete(answer.id)
                        loser, winner = answer, existing

                    report.discarded.append(
                        DiscardedAnswer(
                            kept_answer_id=winner.id,
                            discarded_answer_id=loser.id,
                            exam_id=loser.exam_id,
                            question_id=loser.question_id,
                        )
                    )

                uow.students.delete(source_id)
        except RecordDomainError:
            raise
        except Exception as e:
            logger.exception("merge failed target=%s source=%s", target_id, source_id)
            raise MergeFailedError(f"merge failed target={target_id} source={source_id}: {e}") from e

        for d in report.discarded:
            audit_logger.warning(
                "merge discarded answer=%s kept=%s exam=%s question=%s target=%s source=%s",
                d.discarded_answer_id,
                d.kept_answer_id,
                d.exam_id,
                d.question_id,
                target_id,
                source_id,
            )
        logger.info(
            "merge done target=%s source=%s moved=%s discarded=%s",
            target_id,
            source_id,
            report.moved,
            len(report.discarded),
        )
        return report

    @staticmethod
    def _reown(uow: UnitOfWork, answer: Answer, student_id: str) -> None:
        answer.student_id = student_id
        answer.updated_at = utc_now()
        uow.answers.save(answer)
