"""
Unit of Work 포트 — 트랜잭션 경계 (Django 미사용)
"""
from __future__ import annotations

from typing import Protocol

from gradebook.application.ports.repositories import (
    AnswerRepository,
    ExamRepository,
    QuestionRepository,
    StudentRepository,
)


class UnitOfWork(Protocol):
    """
    트랜잭션 단위. __enter__에서 시작, 정상 종료 시 commit,
    예외로 빠져나가면 블록 안의 모든 쓰기를 rollback.
    """

    @property
    def exams(self) -> ExamRepository:
        ...

    @property
    def questions(self) -> QuestionRepository:
        ...

    @property
    def students(self) -> StudentRepository:
        ...

    @property
    def answers(self) -> AnswerRepository:
        ...

    def __enter__(self) -> "UnitOfWork":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
