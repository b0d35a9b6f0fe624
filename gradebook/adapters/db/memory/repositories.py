"""
메모리 Repository — MemoryRecordStore 위의 포트 구현

읽기/쓰기 모두 복사본을 주고받는다 (호출자가 엔티티를 고쳐도 save 전에는 스냅샷 불변).
"""
from __future__ import annotations

import copy
from typing import Callable, Iterable, Optional

from gradebook.adapters.db.memory.store import MemoryRecordStore
from gradebook.domain.records.entities import Answer, Exam, Question, Student


def _drop(rows: dict, predicate: Callable) -> None:
    # 참조가 uid 문자열이라 연쇄 삭제는 직접 한다
    for key in [k for k, v in rows.items() if predicate(v)]:
        del rows[key]


class MemoryExamRepository:
    def __init__(self, store: MemoryRecordStore) -> None:
        self._store = store

    def get(self, exam_id: str) -> Optional[Exam]:
        e = self._store.exams.get(exam_id)
        return copy.deepcopy(e) if e is not None else None

    def list_all(self) -> list[Exam]:
        return [copy.deepcopy(e) for e in self._store.exams.values()]

    def save(self, exam: Exam) -> Exam:
        self._store.exams[exam.id] = copy.deepcopy(exam)
        return exam

    def delete(self, exam_id: str) -> None:
        """시험과 그 문항/답안을 함께 지운다."""
        self._store.exams.pop(exam_id, None)
        _drop(self._store.questions, lambda q: q.exam_id == exam_id)
        _drop(self._store.answers, lambda a: a.exam_id == exam_id)


class MemoryQuestionRepository:
    def __init__(self, store: MemoryRecordStore) -> None:
        self._store = store

    def get(self, question_id: str) -> Optional[Question]:
        q = self._store.questions.get(question_id)
        return copy.deepcopy(q) if q is not None else None

    def list_for_exam(self, exam_id: str) -> list[Question]:
        rows = [copy.deepcopy(q) for q in self._store.questions.values() if q.exam_id == exam_id]
        rows.sort(key=lambda q: q.number)
        return rows

    def list_all(self) -> list[Question]:
        return [copy.deepcopy(q) for q in self._store.questions.values()]

    def save(self, question: Question) -> Question:
        self._store.questions[question.id] = copy.deepcopy(question)
        return question

    def save_many(self, questions: Iterable[Question]) -> None:
        for q in questions:
            self.save(q)

    def delete(self, question_id: str) -> None:
        self._store.questions.pop(question_id, None)
        _drop(self._store.answers, lambda a: a.question_id == question_id)


class MemoryStudentRepository:
    def __init__(self, store: MemoryRecordStore) -> None:
        self._store = store

    def get(self, student_id: str) -> Optional[Student]:
        s = self._store.students.get(student_id)
        return copy.deepcopy(s) if s is not None else None

    def get_for_update(self, student_id: str) -> Optional[Student]:
        return self.get(student_id)

    def list_all(self) -> list[Student]:
        return [copy.deepcopy(s) for s in self._store.students.values()]

    def find_exact(self, name: str, school: str, grade: str) -> Optional[Student]:
        for s in self._store.students.values():
            if s.name == name and s.school == school and s.grade == grade:
                return copy.deepcopy(s)
        return None

    def save(self, student: Student) -> Student:
        self._store.students[student.id] = copy.deepcopy(student)
        return student

    def delete(self, student_id: str) -> None:
        self._store.students.pop(student_id, None)
        _drop(self._store.answers, lambda a: a.student_id == student_id)


class MemoryAnswerRepository:
    def __init__(self, store: MemoryRecordStore) -> None:
        self._store = store

    def _filter(self, pred) -> list[Answer]:
        return [copy.deepcopy(a) for a in self._store.answers.values() if pred(a)]

    def get(self, answer_id: str) -> Optional[Answer]:
        a = self._store.answers.get(answer_id)
        return copy.deepcopy(a) if a is not None else None

    def list_all(self) -> list[Answer]:
        return self._filter(lambda a: True)

    def list_for_exam(self, exam_id: str) -> list[Answer]:
        return self._filter(lambda a: a.exam_id == exam_id)

    def list_for_student(self, student_id: str) -> list[Answer]:
        return self._filter(lambda a: a.student_id == student_id)

    def list_for_exam_and_student(self, exam_id: str, student_id: str) -> list[Answer]:
        return self._filter(lambda a: a.exam_id == exam_id and a.student_id == student_id)

    def save(self, answer: Answer) -> Answer:
        self._store.answers[answer.id] = copy.deepcopy(answer)
        return answer

    def save_many(self, answers: Iterable[Answer]) -> None:
        for a in answers:
            self.save(a)

    def delete(self, answer_id: str) -> None:
        self._store.answers.pop(answer_id, None)

    def delete_many(self, answer_ids: Iterable[str]) -> int:
        removed = 0
        for answer_id in answer_ids:
            if self._store.answers.pop(answer_id, None) is not None:
                removed += 1
        return removed
