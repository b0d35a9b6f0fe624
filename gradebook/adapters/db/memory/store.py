"""
메모리 레코드 스냅샷 — 외부 저장소에서 이미 가져온 레코드 묶음

엔진 호출마다 명시적으로 넘기는 스냅샷 객체. 전역/호출 간 캐시 없음.
to_dict()/from_dict() 는 기존 전체 내보내기 형식:
  {"exams": [...], "questions": [...], "students": [...], "answers": [...], "exportedAt": "..."}
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from gradebook.domain.records.entities import Answer, Exam, Question, Student
from gradebook.domain.shared.ids import utc_now


@dataclass
class MemoryRecordStore:
    exams: dict[str, Exam] = field(default_factory=dict)
    questions: dict[str, Question] = field(default_factory=dict)
    students: dict[str, Student] = field(default_factory=dict)
    answers: dict[str, Answer] = field(default_factory=dict)

    def snapshot(self) -> tuple[dict, dict, dict, dict]:
        return copy.deepcopy((self.exams, self.questions, self.students, self.answers))

    def restore(self, snap: tuple[dict, dict, dict, dict]) -> None:
        self.exams, self.questions, self.students, self.answers = snap

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "MemoryRecordStore":
        store = MemoryRecordStore()
        for raw in data.get("exams") or []:
            e = Exam.from_dict(raw)
            store.exams[e.id] = e
        for raw in data.get("questions") or []:
            q = Question.from_dict(raw)
            store.questions[q.id] = q
        for raw in data.get("students") or []:
            s = Student.from_dict(raw)
            store.students[s.id] = s
        for raw in data.get("answers") or []:
            a = Answer.from_dict(raw)
            store.answers[a.id] = a
        return store

    def to_dict(self) -> dict[str, Any]:
        return {
            "exams": [e.to_dict() for e in self.exams.values()],
            "questions": [q.to_dict() for q in self.questions.values()],
            "students": [s.to_dict() for s in self.students.values()],
            "answers": [a.to_dict() for a in self.answers.values()],
            "exportedAt": utc_now().isoformat(),
        }
