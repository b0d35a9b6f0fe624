"""
Records Repository — Django ORM 구현 (메서드 내부에서만 apps.domains.records import)

.objects 접근은 이 모듈 안으로 한정. 목록은 row_id(저장 순서) 순.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from gradebook.domain.records.entities import Answer, Exam, Question, QuestionType, Student

# SQLite 바인드 변수 한도 대비
_IN_CHUNK = 500


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _chunks(ids: list[str]) -> Iterable[list[str]]:
    for i in range(0, len(ids), _IN_CHUNK):
        yield ids[i:i + _IN_CHUNK]


# ======================================================
# model ↔ entity
# ======================================================
def _exam_to_entity(m) -> Optional[Exam]:
    if m is None:
        return None
    return Exam(
        id=m.uid,
        name=m.name,
        organization=m.organization,
        school=m.school,
        grade=m.grade,
        date=m.date,
        series=m.series,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


def _question_to_entity(m) -> Optional[Question]:
    if m is None:
        return None
    return Question(
        id=m.uid,
        exam_id=m.exam_uid,
        number=int(m.number or 0),
        type=QuestionType.parse(m.type),
        domain=m.domain,
        sub_domain=m.sub_domain,
        passage=m.passage,
        points=float(m.points or 0.0),
        correct_answer=m.correct_answer,
        choice_explanations={str(k): str(v) for k, v in (m.choice_explanations or {}).items()},
        intent=m.intent,
        created_at=m.created_at,
    )


def _student_to_entity(m) -> Optional[Student]:
    if m is None:
        return None
    return Student(
        id=m.uid,
        name=m.name,
        school=m.school,
        grade=m.grade,
        organization=m.organization,
        created_at=m.created_at,
    )


def _answer_to_entity(m) -> Optional[Answer]:
    if m is None:
        return None
    return Answer(
        id=m.uid,
        exam_id=m.exam_uid,
        student_id=m.student_uid,
        question_id=m.question_uid,
        answer_text=m.answer_text,
        score_received=m.score_received,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


# ======================================================
# repositories
# ======================================================
class DjangoExamRepository:
    def get(self, exam_id: str) -> Optional[Exam]:
        from apps.domains.records.models import Exam as ExamModel
        return _exam_to_entity(ExamModel.objects.filter(uid=exam_id).first())

    def list_all(self) -> list[Exam]:
        from apps.domains.records.models import Exam as ExamModel
        return [_exam_to_entity(m) for m in ExamModel.objects.order_by("row_id")]

    def save(self, exam: Exam) -> Exam:
        from apps.domains.records.models import Exam as ExamModel
        ExamModel.objects.update_or_create(
            uid=exam.id,
            defaults={
                "name": exam.name,
                "organization": exam.organization,
                "school": exam.school,
                "grade": exam.grade,
                "date": exam.date,
                "series": exam.series,
                "created_at": _aware(exam.created_at),
                "updated_at": _aware(exam.updated_at),
            },
        )
        return exam

    def delete(self, exam_id: str) -> None:
        """시험과 그 문항/답안을 함께 지운다."""
        from apps.domains.records.models import Answer as AnswerModel
        from apps.domains.records.models import Exam as ExamModel
        from apps.domains.records.models import Question as QuestionModel
        from django.db import transaction
        with transaction.atomic():
            AnswerModel.objects.filter(exam_uid=exam_id).delete()
            QuestionModel.objects.filter(exam_uid=exam_id).delete()
            ExamModel.objects.filter(uid=exam_id).delete()


class DjangoQuestionRepository:
    def get(self, question_id: str) -> Optional[Question]:
        from apps.domains.records.models import Question as QuestionModel
        return _question_to_entity(QuestionModel.objects.filter(uid=question_id).first())

    def list_for_exam(self, exam_id: str) -> list[Question]:
        from apps.domains.records.models import Question as QuestionModel
        qs = QuestionModel.objects.filter(exam_uid=exam_id).order_by("number", "row_id")
        return [_question_to_entity(m) for m in qs]

    def list_all(self) -> list[Question]:
        from apps.domains.records.models import Question as QuestionModel
        return [_question_to_entity(m) for m in QuestionModel.objects.order_by("row_id")]

    def save(self, question: Question) -> Question:
        from apps.domains.records.models import Question as QuestionModel
        QuestionModel.objects.update_or_create(
            uid=question.id,
            defaults={
                "exam_uid": question.exam_id,
                "number": question.number,
                "type": question.type_label,
                "domain": question.domain,
                "sub_domain": question.sub_domain,
                "passage": question.passage,
                "points": question.points,
                "correct_answer": question.correct_answer,
                "choice_explanations": dict(question.choice_explanations),
                "intent": question.intent,
                "created_at": _aware(question.created_at),
            },
        )
        return question

    def save_many(self, questions: Iterable[Question]) -> None:
        for q in questions:
            self.save(q)

    def delete(self, question_id: str) -> None:
        from apps.domains.records.models import Answer as AnswerModel
        from apps.domains.records.models import Question as QuestionModel
        from django.db import transaction
        with transaction.atomic():
            AnswerModel.objects.filter(question_uid=question_id).delete()
            QuestionModel.objects.filter(uid=question_id).delete()


class DjangoStudentRepository:
    def get(self, student_id: str) -> Optional[Student]:
        from apps.domains.records.models import Student as StudentModel
        return _student_to_entity(StudentModel.objects.filter(uid=student_id).first())

    def get_for_update(self, student_id: str) -> Optional[Student]:
        """호출자가 이미 UoW 트랜잭션 내에 있어야 함 (select_for_update 락 유지)."""
        from apps.domains.records.models import Student as StudentModel
        m = StudentModel.objects.select_for_update().filter(uid=student_id).first()
        return _student_to_entity(m)

    def list_all(self) -> list[Student]:
        from apps.domains.records.models import Student as StudentModel
        return [_student_to_entity(m) for m in StudentModel.objects.order_by("row_id")]

    def find_exact(self, name: str, school: str, grade: str) -> Optional[Student]:
        from apps.domains.records.models import Student as StudentModel
        m = (
            StudentModel.objects.filter(name=name, school=school, grade=grade)
            .order_by("row_id")
            .first()
        )
        return _student_to_entity(m)

    def save(self, student: Student) -> Student:
        from apps.domains.records.models import Student as StudentModel
        StudentModel.objects.update_or_create(
            uid=student.id,
            defaults={
                "name": student.name,
                "school": student.school,
                "grade": student.grade,
                "organization": student.organization,
                "created_at": _aware(student.created_at),
            },
        )
        return student

    def delete(self, student_id: str) -> None:
        from apps.domains.records.models import Answer as AnswerModel
        from apps.domains.records.models import Student as StudentModel
        from django.db import transaction
        with transaction.atomic():
            AnswerModel.objects.filter(student_uid=student_id).delete()
            StudentModel.objects.filter(uid=student_id).delete()


class DjangoAnswerRepository:
    def _list(self, **filters) -> list[Answer]:
        from apps.domains.records.models import Answer as AnswerModel
        return [_answer_to_entity(m) for m in AnswerModel.objects.filter(**filters).order_by("row_id")]

    def get(self, answer_id: str) -> Optional[Answer]:
        from apps.domains.records.models import Answer as AnswerModel
        return _answer_to_entity(AnswerModel.objects.filter(uid=answer_id).first())

    def list_all(self) -> list[Answer]:
        return self._list()

    def list_for_exam(self, exam_id: str) -> list[Answer]:
        return self._list(exam_uid=exam_id)

    def list_for_student(self, student_id: str) -> list[Answer]:
        return self._list(student_uid=student_id)

    def list_for_exam_and_student(self, exam_id: str, student_id: str) -> list[Answer]:
        return self._list(exam_uid=exam_id, student_uid=student_id)

    def save(self, answer: Answer) -> Answer:
        from apps.domains.records.models import Answer as AnswerModel
        AnswerModel.objects.update_or_create(
            uid=answer.id,
            defaults={
                "exam_uid": answer.exam_id,
                "student_uid": answer.student_id,
                "question_uid": answer.question_id,
                "answer_text": answer.answer_text,
                "score_received": answer.score_received,
                "created_at": _aware(answer.created_at),
                "updated_at": _aware(answer.updated_at),
            },
        )
        return answer

    def save_many(self, answers: Iterable[Answer]) -> None:
        for a in answers:
            self.save(a)

    def delete(self, answer_id: str) -> None:
        from apps.domains.records.models import Answer as AnswerModel
        AnswerModel.objects.filter(uid=answer_id).delete()

    def delete_many(self, answer_ids: Iterable[str]) -> int:
        from apps.domains.records.models import Answer as AnswerModel
        removed = 0
        for chunk in _chunks(list(answer_ids)):
            deleted, _ = AnswerModel.objects.filter(uid__in=chunk).delete()
            removed += deleted
        return removed
