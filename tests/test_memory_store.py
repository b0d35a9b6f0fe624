import pytest

from conftest import answer, objective
from gradebook.adapters.db.memory.store import MemoryRecordStore
from gradebook.adapters.db.memory.uow import MemoryUnitOfWork
from gradebook.application.use_cases.results.report import get_all_exam_results
from gradebook.config import DEFAULT_ORGANIZATION
from gradebook.domain.records.entities import Exam, QuestionType, Student


class TestMemoryRecordStore:
    def test_export_shape_round_trip(self, seeded):
        data = seeded.store.to_dict()
        assert set(data) == {"exams", "questions", "students", "answers", "exportedAt"}
        assert data["questions"][0]["type"] == "객관식"

        restored = MemoryUnitOfWork(MemoryRecordStore.from_dict(data))
        assert restored.questions.get("e1-q3").type is QuestionType.ESSAY
        assert [(r.student.id, r.total_score) for r in get_all_exam_results(restored, "e1")] == [
            ("s1", 9.0),
            ("s2", 4.0),
            ("s3", 0.0),
        ]

    def test_from_legacy_dict_defaults(self):
        store = MemoryRecordStore.from_dict({
            "students": [{"id": "s1", "name": "김민수", "grade": 1}],
            "answers": [{"id": "a1", "examId": "e1", "studentId": "s1", "questionId": "q1",
                         "answerText": "3", "scoreReceived": None, "updatedAt": "2024-03-01T09:00:00Z"}],
        })
        assert store.students["s1"].grade == "1"
        assert store.students["s1"].organization == DEFAULT_ORGANIZATION
        assert store.answers["a1"].updated_at.tzinfo is not None


class TestMemoryUnitOfWork:
    def test_exception_restores_snapshot(self, uow):
        uow.students.save(Student(id="keep", name="김민수"))
        with pytest.raises(RuntimeError):
            with uow:
                uow.students.save(Student(id="lost", name="이영희"))
                uow.students.delete("keep")
                raise RuntimeError("boom")
        assert [s.id for s in uow.students.list_all()] == ["keep"]

    def test_nested_block_rolls_back_alone(self, uow):
        with uow:
            uow.exams.save(Exam(id="outer"))
            with uow:
                uow.exams.save(Exam(id="inner"))
                uow.rollback()
        assert [e.id for e in uow.exams.list_all()] == ["outer"]

    def test_reads_are_copies(self, uow):
        uow.students.save(Student(id="s1", name="김민수"))
        s = uow.students.get("s1")
        s.name = "바뀜"
        assert uow.students.get("s1").name == "김민수"


class TestCascadingDelete:
    def _seed(self, uow):
        uow.exams.save(Exam(id="e1"))
        uow.exams.save(Exam(id="e2"))
        q1, q2, other = objective("e1", 1, "3"), objective("e1", 2, "1"), objective("e2", 1, "2")
        uow.questions.save_many([q1, q2, other])
        uow.students.save(Student(id="s1", name="김민수"))
        uow.students.save(Student(id="s2", name="이영희"))
        uow.answers.save_many([
            answer(q1, "s1", "3", aid="s1-q1"),
            answer(q2, "s1", "1", aid="s1-q2"),
            answer(q1, "s2", "2", aid="s2-q1"),
            answer(other, "s2", "2", aid="s2-e2"),
        ])

    def test_question_delete_removes_its_answers(self, uow):
        self._seed(uow)
        uow.questions.delete("e1-q1")
        assert {a.id for a in uow.answers.list_all()} == {"s1-q2", "s2-e2"}

    def test_student_delete_removes_its_answers(self, uow):
        self._seed(uow)
        uow.students.delete("s2")
        assert {a.id for a in uow.answers.list_all()} == {"s1-q1", "s1-q2"}

    def test_exam_delete_removes_questions_and_answers(self, uow):
        self._seed(uow)
        uow.exams.delete("e1")
        assert [q.id for q in uow.questions.list_all()] == ["e2-q1"]
        assert [a.id for a in uow.answers.list_all()] == ["s2-e2"]
        assert len(uow.students.list_all()) == 2
