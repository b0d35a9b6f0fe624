"""
Django Unit of Work — transaction.atomic 래퍼 (lazy import)

중첩 사용 시 안쪽 블록은 savepoint.
"""
from __future__ import annotations


class DjangoUnitOfWork:
    """Django transaction.atomic으로 트랜잭션 경계. 메서드 내부에서 Django import."""

    def __init__(self, using: str = "default") -> None:
        self._using = using
        self._atomics: list = []
        self._exams = None
        self._questions = None
        self._students = None
        self._answers = None

    @property
    def exams(self):
        from gradebook.adapters.db.django.repositories_records import DjangoExamRepository
        if self._exams is None:
            self._exams = DjangoExamRepository()
        return self._exams

    @property
    def questions(self):
        from gradebook.adapters.db.django.repositories_records import DjangoQuestionRepository
        if self._questions is None:
            self._questions = DjangoQuestionRepository()
        return self._questions

    @property
    def students(self):
        from gradebook.adapters.db.django.repositories_records import DjangoStudentRepository
        if self._students is None:
            self._students = DjangoStudentRepository()
        return self._students

    @property
    def answers(self):
        from gradebook.adapters.db.django.repositories_records import DjangoAnswerRepository
        if self._answers is None:
            self._answers = DjangoAnswerRepository()
        return self._answers

    def __enter__(self) -> DjangoUnitOfWork:
        from django.db import transaction
        atomic = transaction.atomic(using=self._using)
        atomic.__enter__()
        self._atomics.append(atomic)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._atomics:
            self._atomics.pop().__exit__(exc_type, exc_val, exc_tb)

    def commit(self) -> None:
        # atomic() 블록 내에서는 명시적 commit 없음; __exit__ 시 자동
        pass

    def rollback(self) -> None:
        from django.db import transaction
        transaction.set_rollback(True, using=self._using)
