from datetime import datetime, timedelta, timezone

import pytest

from gradebook.adapters.db.memory.uow import MemoryUnitOfWork
from gradebook.domain.records.entities import Answer, Exam, Question, QuestionType, Student

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    return BASE_TIME + timedelta(minutes=minutes)


def objective(exam_id, number, correct, points=2.0, domain="문학", passage="", explanations=None, qid=None):
    return Question(
        id=qid or f"{exam_id}-q{number}",
        exam_id=exam_id,
        number=number,
        type=QuestionType.OBJECTIVE,
        domain=domain,
        passage=passage,
        points=points,
        correct_answer=correct,
        choice_explanations=explanations or {},
    )


def essay(exam_id, number, model="", points=5.0, domain="문학", passage="", qid=None):
    return Question(
        id=qid or f"{exam_id}-q{number}",
        exam_id=exam_id,
        number=number,
        type=QuestionType.ESSAY,
        domain=domain,
        passage=passage,
        points=points,
        correct_answer=model,
    )


def answer(question, student_id, text="", score=None, updated=0, aid=None):
    return Answer(
        id=aid or f"a-{question.id}-{student_id}-{updated}",
        exam_id=question.exam_id,
        student_id=student_id,
        question_id=question.id,
        answer_text=text,
        score_received=score,
        created_at=at(updated),
        updated_at=at(updated),
    )


@pytest.fixture
def uow():
    return MemoryUnitOfWork()


@pytest.fixture
def seeded(uow):
    """
    시험 1개 (객관식 2 + 서술형 1, 만점 9) / 학생 3명 / 답안 입력 완료 상태.

    s1: 2 + 3 + 4 = 9 (만점)  s2: 2 + 0 + 2 = 4  s3: 0 + 0 + 미채점 = 0
    """
    exam = Exam(id="e1", name="1학기 중간", date="2024-04-20")
    q1 = objective("e1", 1, "3", points=2.0, domain="문학", passage="춘향전",
                   explanations={"1": "1번은 인물 해석 오류", "3": "정답 해설"})
    q2 = objective("e1", 2, "1", points=3.0, domain="독서", passage="")
    q3 = essay("e1", 3, model="모범 답안 예시", points=4.0, domain="문학", passage="춘향전")

    students = [
        Student(id="s1", name="김민수", school="서울고", grade="1"),
        Student(id="s2", name="이영희", school="서울고", grade="1"),
        Student(id="s3", name="박철수", school="부산고", grade="2"),
    ]

    uow.exams.save(exam)
    uow.questions.save_many([q1, q2, q3])
    for s in students:
        uow.students.save(s)
    uow.answers.save_many([
        answer(q1, "s1", "3"),
        answer(q2, "s1", "1"),
        answer(q3, "s1", "답안", score=4.0),
        answer(q1, "s2", "3"),
        answer(q2, "s2", "4"),
        answer(q3, "s2", "답안", score=2.0),
        answer(q1, "s3", "1"),
        answer(q2, "s3", "5"),
        answer(q3, "s3", "답안"),
    ])
    return uow
