"""
채점 결과 분석 — 시험 요약, 문항별 오답률, 학생별 오답노트 (순수 함수)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from gradebook.domain.records.entities import Answer, Exam, Question, Student
from gradebook.domain.scoring.engine import compute_result
from gradebook.domain.scoring.result import DomainScore, ExamResult, WrongQuestion

CHOICE_KEYS = ("1", "2", "3", "4", "5")

# 지문 미지정 문항 묶음 이름
UNKNOWN_PASSAGE = "기타"


# ======================================================
# 시험 요약
# ======================================================
@dataclass(frozen=True)
class ExamSummary:
    total_students: int
    average_score: float
    max_score: float
    ungraded_essays: int


def summarize_exam(
    results: Sequence[ExamResult],
    questions: Sequence[Question],
    answers: Sequence[Answer],
) -> ExamSummary:
    total = len(results)
    average = sum(r.total_score for r in results) / total if total else 0.0
    essay_ids = {q.id for q in questions if q.is_essay}
    ungraded = sum(
        1 for a in answers if a.question_id in essay_ids and a.score_received is None
    )
    return ExamSummary(
        total_students=total,
        average_score=average,
        max_score=sum(q.points for q in questions),
        ungraded_essays=ungraded,
    )


# ======================================================
# 문항 분석
# ======================================================
@dataclass
class QuestionStats:
    question: Question
    total_answers: int = 0
    wrong_count: int = 0
    # 객관식: 선택지별 학생 ID
    choice_students: dict[str, list[str]] = field(
        default_factory=lambda: {k: [] for k in CHOICE_KEYS}
    )
    # 서술형: 받은 점수별 학생 ID
    score_distribution: dict[float, list[str]] = field(default_factory=dict)

    @property
    def wrong_rate(self) -> float:
        if self.total_answers <= 0:
            return 0.0
        return self.wrong_count / self.total_answers * 100

    @property
    def choice_counts(self) -> dict[str, int]:
        return {k: len(v) for k, v in self.choice_students.items()}


def analyze_questions(
    questions: Sequence[Question],
    answers: Sequence[Answer],
) -> list[QuestionStats]:
    """문항별 오답률. 오답률 높은 순 (동률은 문항 순서 유지)."""
    by_question: dict[str, list[Answer]] = {}
    for a in answers:
        by_question.setdefault(a.question_id, []).append(a)

    stats: list[QuestionStats] = []
    for q in questions:
        qa = by_question.get(q.id, [])
        s = QuestionStats(question=q, total_answers=len(qa))
        if q.is_objective:
            for a in qa:
                if a.answer_text != q.correct_answer:
                    s.wrong_count += 1
                if a.answer_text in s.choice_students:
                    s.choice_students[a.answer_text].append(a.student_id)
        elif q.is_essay:
            for a in qa:
                score = a.score_received if a.score_received is not None else 0.0
                if score < q.points:
                    s.wrong_count += 1
                s.score_distribution.setdefault(float(score), []).append(a.student_id)
        stats.append(s)

    stats.sort(key=lambda s: s.wrong_rate, reverse=True)
    return stats


# ======================================================
# 오답노트 (여러 시험)
# ======================================================
@dataclass(frozen=True)
class WrongNoteEntry:
    exam: Exam
    wrong: WrongQuestion


@dataclass
class PassageStat:
    correct: int = 0
    wrong: int = 0
    unanswered: int = 0


@dataclass
class WrongNote:
    student: Student
    entries: list[WrongNoteEntry] = field(default_factory=list)
    total_exams: int = 0
    total_questions: int = 0
    total_correct: int = 0
    domain_stats: dict[str, DomainScore] = field(default_factory=dict)
    passage_stats: dict[str, PassageStat] = field(default_factory=dict)

    @property
    def total_wrong(self) -> int:
        return len(self.entries)

    @property
    def average_correct_rate(self) -> float:
        if self.total_questions <= 0:
            return 0.0
        return self.total_correct / self.total_questions * 100


def collect_wrong_note(
    student: Student,
    graded: Sequence[tuple[Exam, Sequence[Question], Sequence[Answer]]],
) -> WrongNote:
    """
    (시험, 문항, 이 학생의 답안) 묶음들로 오답노트 구성.

    정렬: 시험일 최신 순 → 문항 번호 순. 시험일 없는 시험은 맨 뒤.
    """
    note = WrongNote(student=student)

    for exam, questions, answers in graded:
        result: Optional[ExamResult] = compute_result(exam, student, questions, answers)
        if result is None:
            continue
        note.total_exams += 1
        note.total_questions += len(questions)

        for domain, ds in result.domain_scores.items():
            agg = note.domain_stats.setdefault(domain, DomainScore())
            agg.score += ds.score
            agg.max_score += ds.max_score
            agg.correct_count += ds.correct_count
            agg.total_count += ds.total_count
            note.total_correct += ds.correct_count

        wrong_ids = {wq.question.id for wq in result.wrong_questions}
        answered_ids = {a.question_id for a in answers}
        for q in questions:
            ps = note.passage_stats.setdefault(q.passage or UNKNOWN_PASSAGE, PassageStat())
            if q.id in wrong_ids:
                ps.wrong += 1
            elif q.id in answered_ids:
                ps.correct += 1
            else:
                ps.unanswered += 1

        note.entries.extend(WrongNoteEntry(exam=exam, wrong=wq) for wq in result.wrong_questions)

    note.entries.sort(key=lambda e: e.wrong.question.number)
    note.entries.sort(key=lambda e: e.exam.date or "", reverse=True)
    note.passage_stats = dict(sorted(note.passage_stats.items()))
    return note
