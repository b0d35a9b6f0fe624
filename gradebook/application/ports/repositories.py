"""
Repository 포트 — 레코드 저장소 추상화 (Django/ORM 미사용)

외부 저장소(REST/ORM/스냅샷)가 제공하는 인증된 CRUD 만 가정한다.
목록 조회는 저장 순서(삽입 순)를 보존해야 한다: 중복 그룹/병합 대상 선정이 순서에 의존.
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Iterable, Optional, Protocol

from gradebook.domain.records.entities import Answer, Exam, Question, Student


class ExamRepository(Protocol):
    @abstractmethod
    def get(self, exam_id: str) -> Optional[Exam]:
        """없으면 None."""
        ...

    @abstractmethod
    def list_all(self) -> list[Exam]:
        ...

    @abstractmethod
    def save(self, exam: Exam) -> Exam:
        """insert/update."""
        ...

    @abstractmethod
    def delete(self, exam_id: str) -> None:
        ...


class QuestionRepository(Protocol):
    @abstractmethod
    def get(self, question_id: str) -> Optional[Question]:
        ...

    @abstractmethod
    def list_for_exam(self, exam_id: str) -> list[Question]:
        """문항 번호 순."""
        ...

    @abstractmethod
    def list_all(self) -> list[Question]:
        ...

    @abstractmethod
    def save(self, question: Question) -> Question:
        ...

    @abstractmethod
    def save_many(self, questions: Iterable[Question]) -> None:
        ...

    @abstractmethod
    def delete(self, question_id: str) -> None:
        ...


class StudentRepository(Protocol):
    @abstractmethod
    def get(self, student_id: str) -> Optional[Student]:
        ...

    @abstractmethod
    def get_for_update(self, student_id: str) -> Optional[Student]:
        """조회 + row lock (병합용). 락 개념이 없는 저장소는 get과 동일."""
        ...

    @abstractmethod
    def list_all(self) -> list[Student]:
        """삽입 순."""
        ...

    @abstractmethod
    def find_exact(self, name: str, school: str, grade: str) -> Optional[Student]:
        """원문 (이름, 학교, 학년) 완전 일치 첫 학생."""
        ...

    @abstractmethod
    def save(self, student: Student) -> Student:
        ...

    @abstractmethod
    def delete(self, student_id: str) -> None:
        """학생 레코드만 삭제. 답안 정리는 호출자 책임."""
        ...


class AnswerRepository(Protocol):
    @abstractmethod
    def get(self, answer_id: str) -> Optional[Answer]:
        ...

    @abstractmethod
    def list_all(self) -> list[Answer]:
        """삽입 순."""
        ...

    @abstractmethod
    def list_for_exam(self, exam_id: str) -> list[Answer]:
        ...

    @abstractmethod
    def list_for_student(self, student_id: str) -> list[Answer]:
        ...

    @abstractmethod
    def list_for_exam_and_student(self, exam_id: str, student_id: str) -> list[Answer]:
        ...

    @abstractmethod
    def save(self, answer: Answer) -> Answer:
        """id 기준 upsert."""
        ...

    @abstractmethod
    def save_many(self, answers: Iterable[Answer]) -> None:
        ...

    @abstractmethod
    def delete(self, answer_id: str) -> None:
        ...

    @abstractmethod
    def delete_many(self, answer_ids: Iterable[str]) -> int:
        """삭제된 건수."""
        ...
