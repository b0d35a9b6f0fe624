import logging

import pytest

from conftest import answer, essay, objective
from gradebook.domain.records.entities import Exam, Question, Student
from gradebook.domain.scoring.engine import build_feedback, compute_result, format_number
from gradebook.domain.scoring.ranking import assign_ranks
from gradebook.domain.scoring.result import ExamResult

EXAM = Exam(id="e1", name="모의고사")
STUDENT = Student(id="s1", name="김민수", school="서울고", grade="1")


def _questions():
    return [
        objective("e1", 1, "3", points=2.0, domain="문학", explanations={"1": "1번 해설"}),
        objective("e1", 2, "1", points=3.0, domain="독서"),
        essay("e1", 3, model="모범", points=5.0, domain="문학"),
    ]


class TestComputeResult:
    def test_totals_and_domains(self):
        q1, q2, q3 = _questions()
        answers = [answer(q1, "s1", "3"), answer(q2, "s1", "2"), answer(q3, "s1", "글", score=3.0)]

        r = compute_result(EXAM, STUDENT, [q1, q2, q3], answers)

        assert r.total_score == 5.0
        assert r.max_score == 10.0
        assert r.objective_score == 2.0
        assert r.essay_score == 3.0
        assert r.percentage == 50
        assert list(r.domain_scores) == ["문학", "독서"]
        lit = r.domain_scores["문학"]
        assert (lit.score, lit.max_score, lit.correct_count, lit.total_count) == (5.0, 7.0, 1, 2)
        assert lit.accuracy == 50.0
        assert r.wrong_question_numbers == [2, 3]
        assert r.rank == 0 and r.total_students == 0

    def test_unanswered_question_is_not_wrong(self):
        q1, q2, q3 = _questions()
        r = compute_result(EXAM, STUDENT, [q1, q2, q3], [answer(q1, "s1", "3")])
        assert r.total_score == 2.0
        assert r.max_score == 10.0
        assert r.wrong_questions == []
        assert r.domain_scores["독서"].total_count == 1

    def test_essay_full_marks_is_correct(self):
        q3 = _questions()[2]
        r = compute_result(EXAM, STUDENT, [q3], [answer(q3, "s1", "글", score=5.0)])
        assert r.wrong_questions == []
        assert r.domain_scores["문학"].correct_count == 1

    def test_ungraded_essay_scores_zero_and_is_wrong(self):
        q3 = _questions()[2]
        r = compute_result(EXAM, STUDENT, [q3], [answer(q3, "s1", "글")])
        assert r.essay_score == 0.0
        assert r.wrong_question_numbers == [3]

    def test_answers_for_other_questions_are_ignored(self):
        q1 = _questions()[0]
        stray = answer(objective("e2", 1, "1"), "s1", "1")
        r = compute_result(EXAM, STUDENT, [q1], [stray])
        assert r.total_score == 0.0
        assert r.wrong_questions == []

    def test_unknown_type_scores_zero_and_logs(self, caplog):
        q = Question(id="qx", exam_id="e1", number=9, type="논술형", points=4.0, domain="작문")
        with caplog.at_level(logging.WARNING, logger="gradebook.domain.scoring.engine"):
            r = compute_result(EXAM, STUDENT, [q], [answer(q, "s1", "글")])
        assert r.total_score == 0.0
        assert r.max_score == 4.0
        assert r.wrong_question_numbers == [9]
        assert "unknown question type" in caplog.text

    @pytest.mark.parametrize(
        "exam, student, questions",
        [(None, STUDENT, _questions()), (EXAM, None, _questions()), (EXAM, STUDENT, [])],
    )
    def test_nothing_to_compute(self, exam, student, questions):
        assert compute_result(exam, student, questions, []) is None

    def test_to_dict_uses_legacy_keys(self):
        q1, q2, _ = _questions()
        r = compute_result(EXAM, STUDENT, [q1, q2], [answer(q2, "s1", "4")])
        d = r.to_dict()
        assert d["multipleChoiceScore"] == 0.0
        assert d["domainScores"]["독서"] == {"score": 0.0, "maxScore": 3.0, "correct": 0, "total": 1}
        assert d["wrongQuestions"][0]["questionNumber"] == 2
        assert d["wrongQuestions"][0]["studentAnswer"] == "4"


class TestFeedback:
    def test_objective_with_explanation(self):
        q1 = _questions()[0]
        assert build_feedback(q1, answer(q1, "s1", "1")) == "정답: 3번 / 학생 답: 1번\n\n해설:\n1번 해설"

    def test_objective_without_explanation(self):
        q2 = _questions()[1]
        assert build_feedback(q2, answer(q2, "s1", "4")) == "정답: 1번 / 학생 답: 4번"

    def test_essay_with_model_answer(self):
        q3 = _questions()[2]
        fb = build_feedback(q3, answer(q3, "s1", "글", score=3.0))
        assert fb == "배점: 5점 / 획득 점수: 3점\n\n모범 답안:\n모범"

    def test_essay_placeholder_model_answer_omitted(self):
        q = essay("e1", 4, model="서술형", points=4.5)
        fb = build_feedback(q, answer(q, "s1", "글", score=2.5))
        assert fb == "배점: 4.5점 / 획득 점수: 2.5점"

    def test_essay_ungraded(self):
        q = essay("e1", 4, model="  ", points=5.0)
        assert build_feedback(q, answer(q, "s1", "글")) == "배점: 5점 / 획득 점수: 미채점"

    def test_format_number(self):
        assert format_number(5.0) == "5"
        assert format_number(4.5) == "4.5"
        assert format_number(3) == "3"
        assert format_number(None) == ""


def _result(student_id, score):
    return ExamResult(exam=EXAM, student=Student(id=student_id, name=student_id), total_score=score)


class TestAssignRanks:
    def test_ties_share_rank(self):
        ranked = assign_ranks([_result("a", 90), _result("b", 90), _result("c", 80)])
        assert [r.rank for r in ranked] == [1, 1, 3]

    def test_competition_ranking(self):
        ranked = assign_ranks([_result("d", 70), _result("b", 80), _result("a", 90), _result("c", 80)])
        assert [r.student.id for r in ranked] == ["a", "b", "c", "d"]
        assert [r.rank for r in ranked] == [1, 2, 2, 4]
        assert all(r.total_students == 4 for r in ranked)

    def test_stable_for_equal_scores(self):
        ranked = assign_ranks([_result("x", 50), _result("y", 50)])
        assert [r.student.id for r in ranked] == ["x", "y"]

    def test_single_and_empty(self):
        ranked = assign_ranks([_result("solo", 0)])
        assert (ranked[0].rank, ranked[0].total_students) == (1, 1)
        assert assign_ranks([]) == []

    def test_returns_new_list(self):
        results = [_result("a", 1), _result("b", 2)]
        ranked = assign_ranks(results)
        assert ranked is not results
        assert [r.student.id for r in results] == ["a", "b"]
