"""
답안 정리 Use Case — 중복 답안 / 고아 답안 / 답안 없는 학생

모두 멱등. 실패하지 않고 삭제 건수만 돌려준다.
쓰기가 가라앉은 뒤 언제 실행해도 안전 (배타 실행 불필요).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from gradebook.application.ports.unit_of_work import UnitOfWork
from gradebook.domain.records.entities import Answer

logger = logging.getLogger("gradebook.cleanup")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _updated_key(answer: Answer) -> datetime:
    v = answer.updated_at
    if v is None:
        return _OLDEST
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


@dataclass(frozen=True)
class CleanupReport:
    orphaned: int
    duplicates: int


class AnswerDeduplicator:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def remove_duplicate_answers(self, dry_run: bool = False) -> int:
        """
        (시험, 학생, 문항) 당 updated_at 이 가장 늦은 답안 1건만 남김.
        동률은 저장 순서상 먼저인 답안 (최신순 안정 정렬의 첫 번째).
        """
        with self._uow as uow:
            answers = uow.answers.list_all()
            latest_first = sorted(answers, key=_updated_key, reverse=True)

            seen: set[tuple[str, str, str]] = set()
            to_remove: list[str] = []
            for a in latest_first:
                if a.slot_key in seen:
                    to_remove.append(a.id)
                else:
                    seen.add(a.slot_key)

            if dry_run:
                return len(to_remove)
            removed = uow.answers.delete_many(to_remove) if to_remove else 0

        if removed:
            logger.info("duplicate answers removed=%s", removed)
        return removed

    def remove_orphaned_answers(self, dry_run: bool = False) -> int:
        """시험/학생/문항 중 하나라도 없는 답안 삭제."""
        with self._uow as uow:
            exam_ids = {e.id for e in uow.exams.list_all()}
            student_ids = {s.id for s in uow.students.list_all()}
            question_ids = {q.id for q in uow.questions.list_all()}

            to_remove = [
                a.id
                for a in uow.answers.list_all()
                if a.exam_id not in exam_ids
                or a.student_id not in student_ids
                or a.question_id not in question_ids
            ]
            if dry_run:
                return len(to_remove)
            removed = uow.answers.delete_many(to_remove) if to_remove else 0

        if removed:
            logger.info("orphaned answers removed=%s", removed)
        return removed

    def remove_students_with_no_answers(self, dry_run: bool = False) -> int:
        """
        답안이 하나도 없는 학생 삭제 (병합 잔여물 정리).

        전제: 답안 전체 적재가 한 번 이상 끝난 뒤에만 호출 (호출자 책임).
        아직 답안을 입력할 기회가 없었던 학생도 지워진다.
        """
        with self._uow as uow:
            with_answers = {a.student_id for a in uow.answers.list_all()}
            empty = [s.id for s in uow.students.list_all() if s.id not in with_answers]
            if dry_run:
                return len(empty)
            for student_id in empty:
                uow.students.delete(student_id)

        if empty:
            logger.info("students without answers removed=%s", len(empty))
        return len(empty)

    def run_all(self, dry_run: bool = False) -> CleanupReport:
        """고아 답안 → 중복 답안 순. dry_run 이면 건수만 센다."""
        orphaned = self.remove_orphaned_answers(dry_run=dry_run)
        duplicates = self.remove_duplicate_answers(dry_run=dry_run)
        return CleanupReport(orphaned=orphaned, duplicates=duplicates)
