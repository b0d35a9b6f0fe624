import logging

from conftest import answer, essay, objective
from gradebook.application.use_cases.answers.cleanup import AnswerDeduplicator
from gradebook.application.use_cases.answers.entry import save_answers, save_questions
from gradebook.domain.records.entities import Answer, Exam, Student

Q1 = objective("e1", 1, "3", qid="q1")
Q2 = objective("e1", 2, "1", qid="q2")


def _seed(uow):
    uow.exams.save(Exam(id="e1", name="중간"))
    uow.questions.save_many([Q1, Q2])
    uow.students.save(Student(id="s1", name="김민수"))
    uow.students.save(Student(id="s2", name="이영희"))


class TestRemoveDuplicateAnswers:
    def test_keeps_latest_per_slot(self, uow):
        _seed(uow)
        uow.answers.save_many([
            answer(Q1, "s1", "1", updated=1, aid="old"),
            answer(Q1, "s1", "2", updated=5, aid="new"),
            answer(Q1, "s1", "3", updated=3, aid="mid"),
            answer(Q2, "s1", "1", updated=1, aid="other-slot"),
        ])
        removed = AnswerDeduplicator(uow).remove_duplicate_answers()
        assert removed == 2
        assert [a.id for a in uow.answers.list_all()] == ["new", "other-slot"]

    def test_tie_keeps_first_in_store_order(self, uow):
        _seed(uow)
        uow.answers.save_many([
            answer(Q1, "s1", "1", updated=2, aid="first"),
            answer(Q1, "s1", "2", updated=2, aid="second"),
        ])
        AnswerDeduplicator(uow).remove_duplicate_answers()
        assert [a.id for a in uow.answers.list_all()] == ["first"]

    def test_missing_timestamp_sorts_oldest(self, uow):
        _seed(uow)
        stale = answer(Q1, "s1", "1", aid="no-ts")
        stale.updated_at = None
        uow.answers.save_many([stale, answer(Q1, "s1", "2", updated=0, aid="dated")])
        AnswerDeduplicator(uow).remove_duplicate_answers()
        assert [a.id for a in uow.answers.list_all()] == ["dated"]

    def test_idempotent_and_logs(self, uow, caplog):
        _seed(uow)
        uow.answers.save_many([answer(Q1, "s1", updated=1, aid="x"), answer(Q1, "s1", updated=2, aid="y")])
        dedup = AnswerDeduplicator(uow)
        with caplog.at_level(logging.INFO, logger="gradebook.cleanup"):
            assert dedup.remove_duplicate_answers() == 1
            assert dedup.remove_duplicate_answers() == 0
        assert "duplicate answers removed=1" in caplog.text

    def test_empty_store(self, uow):
        assert AnswerDeduplicator(uow).remove_duplicate_answers() == 0


class TestRemoveOrphanedAnswers:
    def test_removes_answers_with_missing_references(self, uow):
        _seed(uow)
        ghost_question = objective("e1", 9, "1", qid="gone")
        uow.answers.save_many([
            answer(Q1, "s1", aid="ok"),
            answer(Q1, "nobody", aid="no-student"),
            answer(ghost_question, "s1", aid="no-question"),
            Answer(id="no-exam", exam_id="e404", student_id="s1", question_id="q1"),
        ])
        assert AnswerDeduplicator(uow).remove_orphaned_answers() == 3
        assert [a.id for a in uow.answers.list_all()] == ["ok"]


class TestRemoveStudentsWithNoAnswers:
    def test_removes_only_empty_students(self, uow):
        _seed(uow)
        uow.answers.save(answer(Q1, "s1", aid="a"))
        assert AnswerDeduplicator(uow).remove_students_with_no_answers() == 1
        assert [s.id for s in uow.students.list_all()] == ["s1"]


class TestRunAll:
    def test_dry_run_counts_without_deleting(self, uow):
        _seed(uow)
        uow.answers.save_many([
            answer(Q1, "s1", updated=1, aid="d1"),
            answer(Q1, "s1", updated=2, aid="d2"),
            answer(Q1, "ghost", aid="orphan"),
        ])
        report = AnswerDeduplicator(uow).run_all(dry_run=True)
        assert (report.orphaned, report.duplicates) == (1, 1)
        assert len(uow.answers.list_all()) == 3

    def test_orphans_removed_before_duplicates(self, uow):
        _seed(uow)
        uow.answers.save_many([
            answer(Q1, "ghost", updated=1, aid="g1"),
            answer(Q1, "ghost", updated=2, aid="g2"),
            answer(Q2, "s2", updated=1, aid="d1"),
            answer(Q2, "s2", updated=2, aid="d2"),
        ])
        report = AnswerDeduplicator(uow).run_all()
        assert (report.orphaned, report.duplicates) == (2, 1)
        assert [a.id for a in uow.answers.list_all()] == ["d2"]


class TestSaveAnswers:
    def test_upsert_by_slot(self, uow):
        _seed(uow)
        uow.answers.save(answer(Q1, "s1", "1", updated=0, aid="existing"))

        created = save_answers(uow, [
            Answer(exam_id="e1", student_id="s1", question_id="q1", answer_text="3"),
            Answer(exam_id="e1", student_id="s1", question_id="q2", answer_text="1"),
        ])

        assert created == 1
        rows = uow.answers.list_for_student("s1")
        assert len(rows) == 2
        kept = uow.answers.get("existing")
        assert kept.answer_text == "3"
        assert kept.updated_at > kept.created_at

    def test_same_slot_twice_in_one_batch(self, uow):
        _seed(uow)
        created = save_answers(uow, [
            Answer(exam_id="e1", student_id="s1", question_id="q1", answer_text="1"),
            Answer(exam_id="e1", student_id="s1", question_id="q1", answer_text="2"),
        ])
        assert created == 1
        (only,) = uow.answers.list_all()
        assert only.answer_text == "2"


class TestSaveQuestions:
    def test_update_in_place_by_number(self, uow):
        _seed(uow)
        replacement = objective("ignored", 1, "5", qid="fresh")
        assert save_questions(uow, "e1", [replacement]) == 1
        stored = uow.questions.list_for_exam("e1")
        assert [q.id for q in stored] == ["q1", "q2"]
        assert stored[0].correct_answer == "5"

    def test_replace_drops_old_questions_and_answers(self, uow):
        _seed(uow)
        uow.answers.save(answer(Q1, "s1", aid="a"))
        save_questions(uow, "e1", [essay("x", 1, model="모범", qid="new-q1")], replace=True)
        assert [q.id for q in uow.questions.list_for_exam("e1")] == ["new-q1"]
        assert uow.answers.list_all() == []
