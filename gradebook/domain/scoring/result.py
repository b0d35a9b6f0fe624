"""
시험 결과 (계산되는 데이터, 저장하지 않음)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gradebook.domain.records.entities import Answer, Exam, Question, Student


@dataclass
class DomainScore:
    """영역별 점수 버킷."""
    score: float = 0.0
    max_score: float = 0.0
    correct_count: int = 0
    total_count: int = 0

    @property
    def accuracy(self) -> float:
        """정답률 (%). 문항이 없으면 0."""
        if self.total_count <= 0:
            return 0.0
        return self.correct_count / self.total_count * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "maxScore": self.max_score,
            "correct": self.correct_count,
            "total": self.total_count,
        }


@dataclass
class WrongQuestion:
    question: Question
    answer: Answer
    feedback: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionNumber": self.question.number,
            "questionText": self.question.passage,
            "studentAnswer": self.answer.answer_text,
            "correctAnswer": self.question.correct_answer,
            "feedback": self.feedback,
        }


@dataclass
class ExamResult:
    exam: Exam
    student: Student
    total_score: float = 0.0
    max_score: float = 0.0
    objective_score: float = 0.0
    essay_score: float = 0.0
    # 삽입 순서 = 문항 순서상 영역 첫 등장 순
    domain_scores: dict[str, DomainScore] = field(default_factory=dict)
    wrong_questions: list[WrongQuestion] = field(default_factory=list)
    rank: int = 0
    total_students: int = 0

    @property
    def percentage(self) -> int:
        if self.max_score <= 0:
            return 0
        return round(self.total_score / self.max_score * 100)

    @property
    def wrong_question_numbers(self) -> list[int]:
        return [wq.question.number for wq in self.wrong_questions]

    def to_dict(self) -> dict[str, Any]:
        return {
            "exam": self.exam.to_dict(),
            "student": self.student.to_dict(),
            "totalScore": self.total_score,
            "maxScore": self.max_score,
            "percentage": self.percentage,
            "multipleChoiceScore": self.objective_score,
            "essayScore": self.essay_score,
            "domainScores": {k: v.to_dict() for k, v in self.domain_scores.items()},
            "wrongQuestions": [wq.to_dict() for wq in self.wrong_questions],
            "rank": self.rank,
            "totalStudents": self.total_students,
        }
