"""
레코드 도메인 엔티티 — 순수 파이썬 (Django/ORM 미사용)

시험(Exam) / 문항(Question) / 학생(Student) / 답안(Answer) 은 정규화된 레코드로 분리.
시험 결과(ExamResult)는 저장하지 않고 매 요청마다 계산한다 (domain.scoring).

to_dict()/from_dict() 는 기존 스냅샷(JSON) 형식과 동일한 camelCase 키를 사용.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from gradebook.config import DEFAULT_ORGANIZATION
from gradebook.domain.shared.ids import generate_id, utc_now


class QuestionType(str, Enum):
    """문항 유형. 값은 CSV 계약에 쓰이는 한글 라벨 그대로."""
    OBJECTIVE = "객관식"
    ESSAY = "서술형"

    @classmethod
    def parse(cls, value: Any) -> "QuestionType | str":
        """알 수 없는 라벨은 문자열 그대로 돌려준다 (채점 시 0점 처리)."""
        if isinstance(value, QuestionType):
            return value
        label = str(value or "").strip()
        for member in cls:
            if member.value == label:
                return member
        return label


# 서술형 문항의 정답 칸 자리표시자 ("서술형, 미채점")
ESSAY_PLACEHOLDER = QuestionType.ESSAY.value

# 점수만 입력된 서술형 답안의 답안 텍스트
NO_ANSWER_TEXT = "(답안 없음)"


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Exam:
    id: str = field(default_factory=generate_id)
    name: str = ""
    organization: str = DEFAULT_ORGANIZATION
    school: str = ""
    grade: str = ""
    date: str = ""
    series: str = ""  # 예: "1학기 중간"
    created_at: Optional[datetime] = field(default_factory=utc_now)
    updated_at: Optional[datetime] = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "organization": self.organization,
            "school": self.school,
            "grade": self.grade,
            "date": self.date,
            "series": self.series,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Exam":
        return Exam(
            id=str(data.get("id") or generate_id()),
            name=data.get("name") or "",
            organization=data.get("organization") or DEFAULT_ORGANIZATION,
            school=data.get("school") or "",
            grade=data.get("grade") or "",
            date=data.get("date") or "",
            series=data.get("series") or "",
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )


@dataclass
class Question:
    """
    문항 정의.

    correct_answer
      - 객관식: 정답 선택지 번호 한 자리 ("1".."5")
      - 서술형: 모범 답안 텍스트 (같은 필드를 공유)
    choice_explanations: 객관식 선택지별 해설 {"1": "...", ...}
    """
    id: str = field(default_factory=generate_id)
    exam_id: str = ""
    number: int = 0  # 시험 내에서만 유일
    type: QuestionType | str = QuestionType.OBJECTIVE
    domain: str = ""  # 영역 (예: 문학, 독서, 문법)
    sub_domain: str = ""  # 세부 영역 (예: 고전 시가)
    passage: str = ""  # 작품/지문/단원
    points: float = 0.0
    correct_answer: str = ""
    choice_explanations: dict[str, str] = field(default_factory=dict)
    intent: str = ""  # 출제 의도
    created_at: Optional[datetime] = field(default_factory=utc_now)

    @property
    def is_objective(self) -> bool:
        return self.type == QuestionType.OBJECTIVE

    @property
    def is_essay(self) -> bool:
        return self.type == QuestionType.ESSAY

    @property
    def type_label(self) -> str:
        return self.type.value if isinstance(self.type, QuestionType) else str(self.type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "examId": self.exam_id,
            "number": self.number,
            "type": self.type_label,
            "domain": self.domain,
            "subDomain": self.sub_domain,
            "passage": self.passage,
            "points": self.points,
            "correctAnswer": self.correct_answer,
            "choiceExplanations": dict(self.choice_explanations),
            "intent": self.intent,
            "createdAt": _iso(self.created_at),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Question":
        try:
            number = int(data.get("number") or 0)
        except (TypeError, ValueError):
            number = 0
        return Question(
            id=str(data.get("id") or generate_id()),
            exam_id=str(data.get("examId") or ""),
            number=number,
            type=QuestionType.parse(data.get("type") or QuestionType.OBJECTIVE),
            domain=data.get("domain") or "",
            sub_domain=data.get("subDomain") or "",
            passage=data.get("passage") or "",
            points=_to_float(data.get("points")),
            correct_answer=str(data.get("correctAnswer") or ""),
            choice_explanations={
                str(k): str(v) for k, v in (data.get("choiceExplanations") or {}).items()
            },
            intent=data.get("intent") or "",
            created_at=parse_datetime(data.get("createdAt")),
        )


@dataclass
class Student:
    id: str = field(default_factory=generate_id)
    name: str = ""
    school: str = ""
    grade: str = ""
    organization: str = DEFAULT_ORGANIZATION
    created_at: Optional[datetime] = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "school": self.school,
            "grade": self.grade,
            "organization": self.organization,
            "createdAt": _iso(self.created_at),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Student":
        return Student(
            id=str(data.get("id") or generate_id()),
            name=data.get("name") or "",
            school=data.get("school") or "",
            grade=str(data.get("grade") or ""),
            organization=data.get("organization") or DEFAULT_ORGANIZATION,
            created_at=parse_datetime(data.get("createdAt")),
        )


@dataclass
class Answer:
    """
    학생 답안 1건.

    answer_text: 객관식은 선택 번호, 서술형은 옮겨 적은 답안
    score_received: 서술형 수동 채점 점수 (미채점 None)
    (exam_id, student_id, question_id) 당 1건이 정상 상태. 중복은 cleanup에서 정리.
    """
    id: str = field(default_factory=generate_id)
    exam_id: str = ""
    student_id: str = ""
    question_id: str = ""
    answer_text: str = ""
    score_received: Optional[float] = None
    created_at: Optional[datetime] = field(default_factory=utc_now)
    updated_at: Optional[datetime] = field(default_factory=utc_now)

    @property
    def slot_key(self) -> tuple[str, str, str]:
        return (self.exam_id, self.student_id, self.question_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "examId": self.exam_id,
            "studentId": self.student_id,
            "questionId": self.question_id,
            "answerText": self.answer_text,
            "scoreReceived": self.score_received,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Answer":
        score = data.get("scoreReceived")
        return Answer(
            id=str(data.get("id") or generate_id()),
            exam_id=str(data.get("examId") or ""),
            student_id=str(data.get("studentId") or ""),
            question_id=str(data.get("questionId") or ""),
            answer_text=str(data.get("answerText") or ""),
            score_received=None if score is None else _to_float(score),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )
