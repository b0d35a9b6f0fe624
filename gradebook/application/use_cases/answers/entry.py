"""
문항/답안 적재 Use Case — CSV 가져오기 결과를 저장소에 반영

답안은 (시험, 학생, 문항) 슬롯 기준 upsert: 같은 슬롯을 다시 올려도 중복 답안이 생기지 않는다.
"""
from __future__ import annotations

import logging
from typing import Iterable

from gradebook.application.ports.unit_of_work import UnitOfWork
from gradebook.domain.records.entities import Answer, Question
from gradebook.domain.shared.ids import utc_now

logger = logging.getLogger(__name__)


def save_answers(uow: UnitOfWork, answers: Iterable[Answer]) -> int:
    """신규 생성 건수 반환. 기존 슬롯은 id/created_at 유지, 내용만 교체."""
    created = 0
    with uow:
        slots: dict[tuple[str, str, str], Answer] = {}
        for answer in answers:
            if answer.slot_key not in slots:
                for existing in uow.answers.list_for_exam_and_student(answer.exam_id, answer.student_id):
                    slots.setdefault(existing.slot_key, existing)

            existing = slots.get(answer.slot_key)
            if existing is None:
                uow.answers.save(answer)
                slots[answer.slot_key] = answer
                created += 1
                continue

            existing.answer_text = answer.answer_text
            existing.score_received = answer.score_received
            existing.updated_at = utc_now()
            uow.answers.save(existing)

    logger.info("answers saved created=%s", created)
    return created


def save_questions(
    uow: UnitOfWork,
    exam_id: str,
    questions: Iterable[Question],
    replace: bool = False,
) -> int:
    """
    문항 저장. 저장한 문항 수 반환.

    replace=True: 시험의 기존 문항과 그 답안을 먼저 지운다.
    replace=False: 같은 번호 문항은 id 를 유지한 채 덮어쓴다.
    """
    saved = 0
    with uow:
        existing = uow.questions.list_for_exam(exam_id)
        if replace:
            # 문항 삭제가 답안까지 지운다
            for q in existing:
                uow.questions.delete(q.id)
            by_number: dict[int, Question] = {}
        else:
            by_number = {q.number: q for q in existing}

        for q in questions:
            q.exam_id = exam_id
            current = by_number.get(q.number)
            if current is not None:
                q.id = current.id
                q.created_at = current.created_at
            uow.questions.save(q)
            by_number[q.number] = q
            saved += 1

    logger.info("questions saved exam=%s count=%s replace=%s", exam_id, saved, replace)
    return saved
