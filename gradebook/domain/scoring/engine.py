"""
채점 엔진 — 학생 1명 × 시험 1개 → ExamResult (순수 함수)

채점 정책:
- 객관식: answer_text == correct_answer 이면 배점 전부, 아니면 0
- 서술형: score_received (수동 채점) 그대로, 없으면 0.
  배점과 정확히 같을 때만 정답 (부분 점수는 정답률 집계상 오답)
- 답안이 없는 문항은 0점이며 오답 목록에 넣지 않는다 (미응답은 리포트에서 별도 표시)

점수 계산은 float 그대로. 반올림/표기는 표현 계층 책임.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from gradebook.domain.records.entities import (
    ESSAY_PLACEHOLDER,
    Answer,
    Exam,
    Question,
    Student,
)
from gradebook.domain.scoring.result import DomainScore, ExamResult, WrongQuestion

logger = logging.getLogger(__name__)


def format_number(value: Optional[float]) -> str:
    """5.0 → "5", 4.5 → "4.5", None → ""."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_feedback(question: Question, answer: Answer) -> str:
    """오답 문항 피드백 문구."""
    if question.is_objective:
        explanation = (question.choice_explanations or {}).get(answer.answer_text, "")
        feedback = f"정답: {question.correct_answer}번 / 학생 답: {answer.answer_text}번"
        if explanation:
            feedback += f"\n\n해설:\n{explanation}"
        return feedback

    earned = (
        "미채점" if answer.score_received is None else f"{format_number(answer.score_received)}점"
    )
    feedback = f"배점: {format_number(question.points)}점 / 획득 점수: {earned}"
    model_answer = question.correct_answer or ""
    if model_answer.strip() and model_answer != ESSAY_PLACEHOLDER:
        feedback += f"\n\n모범 답안:\n{model_answer}"
    return feedback


def _grade(question: Question, answer: Answer) -> tuple[bool, float]:
    if question.is_objective:
        is_correct = answer.answer_text == question.correct_answer
        return is_correct, (float(question.points) if is_correct else 0.0)
    if question.is_essay:
        earned = float(answer.score_received) if answer.score_received is not None else 0.0
        return earned == float(question.points), earned
    # 알 수 없는 유형: 채점 불가
    return False, 0.0


def compute_result(
    exam: Optional[Exam],
    student: Optional[Student],
    questions: Sequence[Question],
    answers: Iterable[Answer],
) -> Optional[ExamResult]:
    """
    시험 결과 계산. 시험/학생이 없거나 문항이 비어 있으면 None (계산할 것 없음).

    rank / total_students 는 0 으로 남는다 → ranking.assign_ranks.
    """
    if exam is None or student is None or not questions:
        return None

    result = ExamResult(exam=exam, student=student)

    # 1) 영역 버킷 + 만점
    for q in questions:
        bucket = result.domain_scores.setdefault(q.domain, DomainScore())
        bucket.max_score += q.points
        bucket.total_count += 1
        result.max_score += q.points

    by_id = {q.id: q for q in questions}

    # 2) 제출 답안 채점
    for answer in answers:
        question = by_id.get(answer.question_id)
        if question is None:
            continue

        is_correct, earned = _grade(question, answer)
        if question.is_objective:
            result.objective_score += earned
        elif question.is_essay:
            result.essay_score += earned
        else:
            logger.warning(
                "unknown question type exam=%s question=%s type=%r",
                exam.id,
                question.id,
                question.type_label,
            )

        result.total_score += earned
        bucket = result.domain_scores[question.domain]
        bucket.score += earned
        if is_correct:
            bucket.correct_count += 1
        else:
            result.wrong_questions.append(
                WrongQuestion(
                    question=question,
                    answer=answer,
                    feedback=build_feedback(question, answer),
                )
            )

    return result
