from datetime import datetime

import pytest

from conftest import answer, essay, objective
from gradebook.application.services.csv_interchange import (
    BOM,
    csv_to_objects,
    export_answers,
    export_questions,
    export_results,
    import_answers,
    import_questions,
    objects_to_csv,
    parse_csv,
    parse_essay_cell,
    read_csv_file,
    with_bom,
    write_csv_file,
)
from gradebook.application.use_cases.results.report import get_all_exam_results
from gradebook.application.use_cases.students.identity import StudentIdentityResolver
from gradebook.domain.records.entities import NO_ANSWER_TEXT, Exam, QuestionType, Student


def _comparable(q):
    return (
        q.number,
        q.type,
        q.domain,
        q.sub_domain,
        q.passage,
        q.points,
        q.correct_answer,
        q.choice_explanations,
        q.intent,
    )


class TestLowLevelCsv:
    def test_parse_handles_bom_quotes_newlines_and_blank_lines(self):
        text = BOM + 'a,b\r\n"x\ny","he said ""hi"""\r\n\r\n1,2\r\n'
        assert parse_csv(text) == [["a", "b"], ["x\ny", 'he said "hi"'], ["1", "2"]]

    def test_csv_to_objects_trims_and_fills_missing(self):
        rows = csv_to_objects(" 이름 , 학교 ,학년\n 김민수 ,서울고\n")
        assert rows == [{"이름": "김민수", "학교": "서울고", "학년": ""}]

    def test_header_only_is_empty(self):
        assert csv_to_objects("이름,학교\n") == []

    def test_objects_to_csv_quotes_only_when_needed(self):
        text = objects_to_csv([{"a": "x,y", "b": "plain", "c": 'say "hi"'}])
        assert text == 'a,b,c\r\n"x,y",plain,"say ""hi"""\r\n'

    def test_objects_to_csv_empty(self):
        assert objects_to_csv([]) == ""

    def test_with_bom_is_idempotent(self):
        assert with_bom(with_bom("a")) == BOM + "a"

    def test_file_round_trip_writes_single_bom(self, tmp_path):
        path = write_csv_file(tmp_path / "out.csv", with_bom("이름\n김민수\n"))
        raw = path.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        assert not raw[3:].startswith(b"\xef\xbb\xbf")
        assert csv_to_objects(read_csv_file(path)) == [{"이름": "김민수"}]


QUESTIONS_CSV = (
    "시험명,문항 번호,객관식/서술형,영역,세부 영역,작품/지문/단원,배점,출제 의도,정답,"
    "선택지1,선택지2,선택지3,선택지4,선택지5\n"
    '1학기 중간,1,객관식,문학,고전 시가,"춘향전, 열녀전",2,인물 이해,3,"해설, 하나",정답,'
    '"따옴표 ""인용""",,\n'
    '1학기 중간,2,서술형,문학,,춘향전,5,,서술형,"모범\n답안",,,,\n'
)


class TestImportQuestions:
    def test_current_format(self):
        parsed = import_questions(QUESTIONS_CSV, "e1")
        q1, q2 = parsed.questions

        assert parsed.exam_name == "1학기 중간"
        assert q1.exam_id == "e1"
        assert q1.type is QuestionType.OBJECTIVE
        assert q1.passage == "춘향전, 열녀전"
        assert q1.points == 2.0
        assert q1.correct_answer == "3"
        assert q1.choice_explanations == {"1": "해설, 하나", "3": '따옴표 "인용"'}
        assert q1.intent == "인물 이해"
        assert q2.type is QuestionType.ESSAY
        assert q2.correct_answer == "모범\n답안"
        assert parsed.warnings == []

    def test_legacy_headers_and_defaults(self):
        text = (
            "번호,유형,대영역,소영역,지문,점수,출제의도,정답,선택지1,선택지2\n"
            "1,,독서,,비문학,3점,,2,정답,\n"
            "가,서술형,문학,,,5,,정답 텍스트,모범,\n"
            "3,서술형,문학,,,,,서술형,,둘째 칸 모범\n"
        )
        parsed = import_questions(text, "e1")
        q1, q2, q3 = parsed.questions

        assert q1.type is QuestionType.OBJECTIVE
        assert (q1.domain, q1.passage, q1.points) == ("독서", "비문학", 3.0)
        assert q1.choice_explanations == {}
        assert q2.number == 0
        assert q2.correct_answer == "정답 텍스트"
        assert q3.points == 0.0
        assert q3.correct_answer == "둘째 칸 모범"

        joined = "\n".join(parsed.warnings)
        assert "1번 객관식 문제: 선택지 해설이 없습니다" in joined
        assert "문항 번호" in joined
        assert "배점" in joined

    def test_essay_without_model_answer_warns(self):
        text = "문항 번호,객관식/서술형,배점,정답,선택지1\n4,서술형,5,서술형,\n"
        parsed = import_questions(text, "e1")
        assert parsed.questions[0].correct_answer == ""
        assert parsed.warnings == ["4번 서술형 문제: 모범 답안이 없습니다 (선택지1 컬럼 확인 필요)"]

    def test_unknown_type_is_kept_with_warning(self):
        parsed = import_questions("문항 번호,객관식/서술형,배점\n1,논술형,3\n", "e1")
        assert parsed.questions[0].type == "논술형"
        assert any("논술형" in w for w in parsed.warnings)


class TestQuestionRoundTrip:
    def test_export_then_import_is_identical(self):
        originals = [
            objective(
                "e1", 1, "4", points=2.5, domain="문학", passage="청산별곡, 고려가요",
                explanations={"1": "첫 줄\n둘째 줄", "4": '정답: "청산"'},
            ),
            essay("e1", 2, model="모범 답안, 쉼표 포함", points=10.0, domain="독서", passage="과학 지문"),
            essay("e1", 3, model="", points=3.0),
        ]
        originals[0].sub_domain = "고전 시가"
        originals[0].intent = "화자의 정서 파악"

        text = export_questions(originals, "기말고사")
        assert text.startswith(BOM)

        parsed = import_questions(text, "e1")
        assert parsed.exam_name == "기말고사"
        assert [_comparable(q) for q in parsed.questions] == [_comparable(q) for q in originals]

    def test_export_layout(self):
        text = export_questions([essay("e1", 1, model="모범", points=5.0)])
        (row,) = csv_to_objects(text)
        assert row["정답"] == "서술형"
        assert row["선택지1"] == "모범"
        assert row["배점"] == "5"
        assert row["객관식/서술형"] == "서술형"


class TestParseEssayCell:
    @pytest.mark.parametrize(
        "value, points, expected",
        [
            ("3", 5.0, (NO_ANSWER_TEXT, 3.0)),
            ("5", 5.0, (NO_ANSWER_TEXT, 5.0)),
            ("4.5점", 5.0, (NO_ANSWER_TEXT, 4.5)),
            ("7", 5.0, ("7", None)),
            ("학생이 쓴 답안", 5.0, ("학생이 쓴 답안", None)),
            # 숫자로 시작하는 답안 텍스트도 점수로 읽힌다 (구버전 규칙)
            ("1. 첫째 이유는", 5.0, (NO_ANSWER_TEXT, 1.0)),
        ],
    )
    def test_heuristic(self, value, points, expected):
        assert parse_essay_cell(value, points) == expected


ANSWERS_CSV = (
    "입력일시,시험명,이름,학교,학년,1,2\n"
    "2024-04-20 10:00:00,중간,김민수,서울고,1,3,4\n"
    "2024-04-20 10:00:00,중간,,서울고,1,2,1\n"
    '2024-04-20 10:00:00,중간,이영희,부산고,2,,"긴 답안, 쉼표"\n'
)


class TestImportAnswers:
    def _questions(self):
        return [objective("e1", 1, "3", qid="q1"), essay("e1", 2, points=5.0, qid="q2")]

    def test_rows_become_answers(self, uow):
        parsed = import_answers(ANSWERS_CSV, "e1", self._questions(), StudentIdentityResolver(uow))

        assert len(parsed.created_students) == 2
        assert len(uow.students.list_all()) == 2
        kim = parsed.created_students[0]
        rows = [(a.student_id, a.question_id, a.answer_text, a.score_received) for a in parsed.answers]
        lee = parsed.created_students[1].id
        assert rows == [
            (kim.id, "q1", "3", None),
            (kim.id, "q2", NO_ANSWER_TEXT, 4.0),
            (lee, "q2", "긴 답안, 쉼표", None),
        ]
        assert parsed.warnings == ["3행: 이름이 없어 건너뜀"]

    def test_existing_student_is_reused(self, uow):
        uow.students.save(Student(id="kim", name="김민수", school="서울고등학교", grade="1학년"))
        parsed = import_answers(ANSWERS_CSV, "e1", self._questions(), StudentIdentityResolver(uow))
        assert [s.name for s in parsed.created_students] == ["이영희"]
        assert parsed.answers[0].student_id == "kim"


class TestExportAnswers:
    def test_layout(self):
        exam = Exam(id="e1", name="중간")
        q1 = objective("e1", 1, "3")
        q2 = essay("e1", 2, points=5.0)
        students = {"s1": Student(id="s1", name="김민수", school="서울고", grade="1"),
                    "s2": Student(id="s2", name="이영희", school="부산고", grade="2")}
        answers = [
            answer(q1, "s1", "3"),
            answer(q2, "s1", NO_ANSWER_TEXT, score=4.0),
            answer(q2, "s2", "쓴 답안, 길게"),
        ]

        text = export_answers(exam, [q1, q2], answers, students, exported_at=datetime(2024, 5, 1, 10, 0))
        assert text.startswith(BOM)
        assert parse_csv(text)[0] == ["입력일시", "시험명", "이름", "학교", "학년", "1", "2"]

        rows = csv_to_objects(text)
        assert rows[0]["입력일시"] == "2024-05-01 10:00:00"
        assert (rows[0]["이름"], rows[0]["1"], rows[0]["2"]) == ("김민수", "3", "4")
        assert (rows[1]["이름"], rows[1]["1"], rows[1]["2"]) == ("이영희", "", "쓴 답안, 길게")


class TestExportResults:
    def test_layout(self, seeded):
        text = export_results(get_all_exam_results(seeded, "e1"))
        assert text.startswith(BOM)
        header = parse_csv(text)[0]
        assert header[-4:] == ["문학_점수", "문학_만점", "독서_점수", "독서_만점"]

        first, _, last = csv_to_objects(text)
        assert first["이름"] == "김민수"
        assert (first["총점"], first["만점"]) == ("9.00", "9")
        assert (first["객관식_점수"], first["서술형_점수"]) == ("5.00", "4.00")
        assert (first["등수"], first["응시 인원"]) == ("1", "3")
        assert first["틀린 문제 번호"] == ""
        assert (first["문학_점수"], first["문학_만점"]) == ("6.00", "6")
        assert last["틀린 문제 번호"] == "1,2,3"
