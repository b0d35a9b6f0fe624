from gradebook.application.ports.unit_of_work import UnitOfWork
from gradebook.application.ports.repositories import (
    AnswerRepository,
    ExamRepository,
    QuestionRepository,
    StudentRepository,
)

__all__ = [
    "UnitOfWork",
    "ExamRepository",
    "QuestionRepository",
    "StudentRepository",
    "AnswerRepository",
]
