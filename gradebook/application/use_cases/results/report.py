"""
성적 리포트 Use Case — 저장소 스냅샷 → ExamResult / 요약 / 오답노트

결과는 매 요청마다 다시 계산한다 (캐시 없음).
시험 단위 호출은 그 시험의 문항/답안만 읽으므로 시험끼리 동시에 불러도 무방.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from gradebook.application.ports.unit_of_work import UnitOfWork
from gradebook.domain.records.entities import Answer
from gradebook.domain.scoring.analysis import (
    ExamSummary,
    QuestionStats,
    WrongNote,
    analyze_questions,
    collect_wrong_note,
    summarize_exam,
)
from gradebook.domain.scoring.engine import compute_result
from gradebook.domain.scoring.ranking import assign_ranks
from gradebook.domain.scoring.result import ExamResult

logger = logging.getLogger(__name__)


def _group_by_student(answers: Iterable[Answer]) -> dict[str, list[Answer]]:
    grouped: dict[str, list[Answer]] = {}
    for a in answers:
        grouped.setdefault(a.student_id, []).append(a)
    return grouped


def get_all_exam_results(uow: UnitOfWork, exam_id: str) -> list[ExamResult]:
    """
    시험 응시자 전원의 결과 (등수 부여, 점수 내림차순).
    학생 순서 = 답안 첫 등장 순. 학생 레코드가 없는 답안 묶음은 건너뜀.
    """
    exam = uow.exams.get(exam_id)
    if exam is None:
        return []

    questions = uow.questions.list_for_exam(exam_id)
    results: list[ExamResult] = []
    for student_id, answers in _group_by_student(uow.answers.list_for_exam(exam_id)).items():
        student = uow.students.get(student_id)
        if student is None:
            logger.warning("results: answers without student exam=%s student=%s", exam_id, student_id)
            continue
        result = compute_result(exam, student, questions, answers)
        if result is not None:
            results.append(result)

    return assign_ranks(results)


def get_exam_result(uow: UnitOfWork, exam_id: str, student_id: str) -> Optional[ExamResult]:
    """학생 1명 결과 + 시험 전체 기준 등수/응시 인원. 계산할 것이 없으면 None."""
    exam = uow.exams.get(exam_id)
    student = uow.students.get(student_id)
    questions = uow.questions.list_for_exam(exam_id)
    answers = uow.answers.list_for_exam_and_student(exam_id, student_id)

    result = compute_result(exam, student, questions, answers)
    if result is None:
        return None

    for ranked in get_all_exam_results(uow, exam_id):
        if ranked.student.id == student_id:
            result.rank = ranked.rank
            result.total_students = ranked.total_students
            break
    return result


@dataclass(frozen=True)
class ExamReport:
    results: list[ExamResult]
    summary: ExamSummary
    question_stats: list[QuestionStats]


def build_exam_report(uow: UnitOfWork, exam_id: str) -> Optional[ExamReport]:
    """채점 화면용: 순위표 + 요약 + 문항 분석."""
    if uow.exams.get(exam_id) is None:
        return None
    questions = uow.questions.list_for_exam(exam_id)
    answers = uow.answers.list_for_exam(exam_id)
    results = get_all_exam_results(uow, exam_id)
    return ExamReport(
        results=results,
        summary=summarize_exam(results, questions, answers),
        question_stats=analyze_questions(questions, answers),
    )


def build_wrong_note(
    uow: UnitOfWork,
    student_id: str,
    exam_ids: Optional[Iterable[str]] = None,
) -> Optional[WrongNote]:
    """
    학생 오답노트 (여러 시험). exam_ids 를 주면 그 시험들만.
    학생이 없으면 None.
    """
    student = uow.students.get(student_id)
    if student is None:
        return None

    by_exam: dict[str, list[Answer]] = {}
    for a in uow.answers.list_for_student(student_id):
        by_exam.setdefault(a.exam_id, []).append(a)

    wanted = set(exam_ids) if exam_ids else None
    graded = []
    for exam_id, answers in by_exam.items():
        if wanted is not None and exam_id not in wanted:
            continue
        exam = uow.exams.get(exam_id)
        if exam is None:
            continue
        graded.append((exam, uow.questions.list_for_exam(exam_id), answers))

    return collect_wrong_note(student, graded)
