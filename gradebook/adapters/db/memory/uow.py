"""
메모리 Unit of Work — 스냅샷 복원으로 트랜잭션 경계 흉내

중첩 가능 (savepoint 처럼 블록마다 스냅샷을 쌓는다).
"""
from __future__ import annotations

from typing import Optional

from gradebook.adapters.db.memory.repositories import (
    MemoryAnswerRepository,
    MemoryExamRepository,
    MemoryQuestionRepository,
    MemoryStudentRepository,
)
from gradebook.adapters.db.memory.store import MemoryRecordStore


class MemoryUnitOfWork:
    def __init__(self, store: Optional[MemoryRecordStore] = None) -> None:
        self.store = store if store is not None else MemoryRecordStore()
        self._savepoints: list[tuple] = []
        self._rollback_requested = False
        self.exams = MemoryExamRepository(self.store)
        self.questions = MemoryQuestionRepository(self.store)
        self.students = MemoryStudentRepository(self.store)
        self.answers = MemoryAnswerRepository(self.store)

    def __enter__(self) -> "MemoryUnitOfWork":
        self._savepoints.append(self.store.snapshot())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        snap = self._savepoints.pop()
        if exc_type is not None or self._rollback_requested:
            self.store.restore(snap)
        self._rollback_requested = False

    def commit(self) -> None:
        # 블록 정상 종료 시 자동 반영
        pass

    def rollback(self) -> None:
        self._rollback_requested = True
