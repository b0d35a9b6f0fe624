# CSV 교환: 문항/답안/성적 가져오기·내보내기 (헥사고날 Application Service)
# - 컬럼명은 현장 스프레드시트와의 호환 계약. 이름을 바꾸지 말 것
# - 가져오기는 배치를 중단하지 않는다: 잘못된 행은 기본값/건너뜀 + 경고 문구
# - 내보내기 텍스트는 항상 BOM 으로 시작 (엑셀 한글 깨짐 방지)

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from gradebook.application.use_cases.students.identity import StudentIdentityResolver
from gradebook.domain.records.entities import (
    ESSAY_PLACEHOLDER,
    NO_ANSWER_TEXT,
    Answer,
    Exam,
    Question,
    QuestionType,
    Student,
)
from gradebook.domain.scoring.engine import format_number
from gradebook.domain.scoring.result import ExamResult

logger = logging.getLogger("gradebook.csv")

BOM = "﻿"

# 객관식 선택지 해설 칸의 자리표시자 (해설 없음)
CHOICE_PLACEHOLDER = "정답"

CHOICE_COUNT = 5

# 문항 CSV 헤더 (내보내기 순서)
COL_EXAM_NAME = "시험명"
COL_NUMBER = "문항 번호"
COL_TYPE = "객관식/서술형"
COL_DOMAIN = "영역"
COL_SUB_DOMAIN = "세부 영역"
COL_PASSAGE = "작품/지문/단원"
COL_POINTS = "배점"
COL_INTENT = "출제 의도"
COL_ANSWER = "정답"
CHOICE_COLUMNS = tuple(f"선택지{i}" for i in range(1, CHOICE_COUNT + 1))

QUESTION_HEADERS = (
    COL_EXAM_NAME,
    COL_NUMBER,
    COL_TYPE,
    COL_DOMAIN,
    COL_SUB_DOMAIN,
    COL_PASSAGE,
    COL_POINTS,
    COL_INTENT,
    COL_ANSWER,
) + CHOICE_COLUMNS

# 가져오기 헤더 별칭 (구버전 양식 대응). 앞쪽이 우선
QUESTION_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "type": (COL_TYPE, "유형", "문제유형"),
    "number": (COL_NUMBER, "번호", "문항번호"),
    "domain": (COL_DOMAIN, "대영역"),
    "sub_domain": (COL_SUB_DOMAIN, "세부영역", "소영역"),
    "passage": (COL_PASSAGE, "지문", "작품"),
    "points": (COL_POINTS, "점수"),
    "intent": (COL_INTENT, "출제의도", "의도"),
}

# 답안/성적 CSV
COL_ENTERED_AT = "입력일시"
COL_NAME = "이름"
COL_SCHOOL = "학교"
COL_GRADE = "학년"
COL_TOTAL = "총점"
COL_MAX = "만점"
COL_OBJECTIVE_SCORE = "객관식_점수"
COL_ESSAY_SCORE = "서술형_점수"
COL_RANK = "등수"
COL_COHORT = "응시 인원"
COL_WRONG_NUMBERS = "틀린 문제 번호"

RESULT_HEADERS = (
    COL_EXAM_NAME,
    COL_NAME,
    COL_SCHOOL,
    COL_GRADE,
    COL_TOTAL,
    COL_MAX,
    COL_OBJECTIVE_SCORE,
    COL_ESSAY_SCORE,
    COL_RANK,
    COL_COHORT,
    COL_WRONG_NUMBERS,
)

# parseInt / parseFloat 처럼 앞부분 숫자만 읽는다 ("3번" → 3, "2.5점" → 2.5)
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


# ======================================================
# 저수준 CSV
# ======================================================
def strip_bom(text: str) -> str:
    return text[1:] if text.startswith(BOM) else text


def with_bom(text: str) -> str:
    return text if text.startswith(BOM) else BOM + text


def parse_csv(text: str) -> list[list[str]]:
    """BOM 제거 후 파싱. 따옴표 안 쉼표/줄바꿈/"" 이스케이프 지원, 빈 줄 무시."""
    reader = csv.reader(io.StringIO(strip_bom(text or ""), newline=""))
    return [row for row in reader if row]


def csv_to_objects(text: str) -> list[dict[str, str]]:
    """첫 행을 헤더로 dict 목록. 키/값 모두 strip, 없는 칸은 ""."""
    lines = parse_csv(text)
    if len(lines) < 2:
        return []

    headers = [h.strip() for h in lines[0]]
    objects: list[dict[str, str]] = []
    for line in lines[1:]:
        obj = {}
        for index, header in enumerate(headers):
            obj[header] = line[index].strip() if index < len(line) else ""
        objects.append(obj)
    return objects


def objects_to_csv(rows: Sequence[dict[str, Any]], headers: Optional[Sequence[str]] = None) -> str:
    """dict 목록 → CSV 텍스트 (BOM 없음). 쉼표/따옴표/줄바꿈이 있는 칸만 따옴표 처리."""
    if not rows:
        return ""
    keys = list(headers) if headers else list(rows[0].keys())

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\r\n")
    writer.writerow(keys)
    for row in rows:
        writer.writerow(["" if row.get(k) is None else str(row.get(k)) for k in keys])
    return buf.getvalue()


def read_csv_file(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def write_csv_file(path: str | Path, text: str) -> Path:
    """UTF-8 + BOM 으로 저장."""
    p = Path(path)
    p.write_text(with_bom(text), encoding="utf-8", newline="")
    return p


def _first(row: dict[str, str], aliases: Iterable[str]) -> str:
    for alias in aliases:
        value = row.get(alias) or ""
        if value:
            return value
    return ""


def _parse_int_prefix(value: str) -> Optional[int]:
    m = _INT_PREFIX.match(value or "")
    return int(m.group(1)) if m else None


def _parse_float_prefix(value: str) -> Optional[float]:
    m = _FLOAT_PREFIX.match(value or "")
    return float(m.group(1)) if m else None


# ======================================================
# 문항
# ======================================================
@dataclass
class QuestionImport:
    questions: list[Question] = field(default_factory=list)
    exam_name: str = ""
    warnings: list[str] = field(default_factory=list)


def import_questions(text: str, exam_id: str) -> QuestionImport:
    """
    문항 CSV → Question 목록.

    - 객관식: 정답 칸 = 정답 번호, 선택지1~5 = 선택지별 해설 ("정답" 은 빈 칸 취급)
    - 서술형: 모범 답안은 선택지1 (없으면 선택지2) 칸.
      단 정답 칸에 "서술형" 이 아닌 실제 텍스트가 있으면 그쪽이 우선
    - 문항 번호/배점이 없거나 숫자가 아니면 0 (경고)
    """
    out = QuestionImport()
    rows = csv_to_objects(text)
    if rows:
        out.exam_name = rows[0].get(COL_EXAM_NAME, "")

    def warn(message: str) -> None:
        out.warnings.append(message)
        logger.warning("import_questions exam=%s: %s", exam_id, message)

    for line_no, row in enumerate(rows, start=2):
        type_label = _first(row, QUESTION_HEADER_ALIASES["type"]) or QuestionType.OBJECTIVE.value
        q_type = QuestionType.parse(type_label)
        if not isinstance(q_type, QuestionType):
            warn(f"{line_no}행: 알 수 없는 문항 유형 {type_label!r}")

        raw_number = _first(row, QUESTION_HEADER_ALIASES["number"])
        number = _parse_int_prefix(raw_number)
        if number is None:
            warn(f"{line_no}행: 문항 번호 {raw_number!r} 를 읽을 수 없어 0으로 처리")
            number = 0

        raw_points = _first(row, QUESTION_HEADER_ALIASES["points"])
        points = _parse_float_prefix(raw_points)
        if points is None:
            warn(f"{line_no}행: 배점 {raw_points!r} 를 읽을 수 없어 0으로 처리")
            points = 0.0
        elif points < 0:
            warn(f"{line_no}행: 음수 배점 {raw_points!r} 는 0으로 처리")
            points = 0.0

        answer_cell = row.get(COL_ANSWER, "")
        explanations: dict[str, str] = {}
        if q_type == QuestionType.OBJECTIVE:
            correct_answer = answer_cell
            for index, column in enumerate(CHOICE_COLUMNS, start=1):
                explanation = (row.get(column) or "").strip()
                if explanation and explanation != CHOICE_PLACEHOLDER:
                    explanations[str(index)] = explanation
            if not explanations:
                warn(f"{number}번 객관식 문제: 선택지 해설이 없습니다")
        else:
            correct_answer = row.get(CHOICE_COLUMNS[0]) or row.get(CHOICE_COLUMNS[1]) or ""
            if answer_cell.strip() and answer_cell != ESSAY_PLACEHOLDER:
                correct_answer = answer_cell
            if not correct_answer.strip() or correct_answer == ESSAY_PLACEHOLDER:
                warn(f"{number}번 서술형 문제: 모범 답안이 없습니다 (선택지1 컬럼 확인 필요)")

        out.questions.append(
            Question(
                exam_id=exam_id,
                number=number,
                type=q_type,
                domain=_first(row, QUESTION_HEADER_ALIASES["domain"]),
                sub_domain=_first(row, QUESTION_HEADER_ALIASES["sub_domain"]),
                passage=_first(row, QUESTION_HEADER_ALIASES["passage"]),
                points=points,
                correct_answer=correct_answer,
                choice_explanations=explanations,
                intent=_first(row, QUESTION_HEADER_ALIASES["intent"]),
            )
        )

    logger.info("import_questions exam=%s questions=%s warnings=%s", exam_id, len(out.questions), len(out.warnings))
    return out


def export_questions(questions: Sequence[Question], exam_name: str = "") -> str:
    """import_questions 의 역변환. BOM 포함."""
    rows = []
    for q in questions:
        row = {
            COL_EXAM_NAME: exam_name,
            COL_NUMBER: q.number,
            COL_TYPE: q.type_label,
            COL_DOMAIN: q.domain,
            COL_SUB_DOMAIN: q.sub_domain,
            COL_PASSAGE: q.passage,
            COL_POINTS: format_number(float(q.points)),
            COL_INTENT: q.intent,
            COL_ANSWER: "",
        }
        for column in CHOICE_COLUMNS:
            row[column] = ""

        if q.is_objective:
            row[COL_ANSWER] = q.correct_answer
            for index, column in enumerate(CHOICE_COLUMNS, start=1):
                row[column] = q.choice_explanations.get(str(index), "")
        else:
            row[COL_ANSWER] = ESSAY_PLACEHOLDER
            row[CHOICE_COLUMNS[0]] = q.correct_answer or ""
        rows.append(row)

    return with_bom(objects_to_csv(rows, QUESTION_HEADERS))


# ======================================================
# 답안
# ======================================================
def parse_essay_cell(value: str, points: float) -> tuple[str, Optional[float]]:
    """
    서술형 답안 칸 해석 (구버전 양식 호환 규칙, 형식 버전이 생기면 교체 대상).

    앞부분이 숫자로 읽히고 그 값이 배점 이하면 점수로 본다 → ("(답안 없음)", 점수).
    그 외에는 옮겨 적은 답안 텍스트 → (값, None) 로 수동 채점 대기.
    """
    score = _parse_float_prefix(value)
    if score is not None and score <= points:
        return NO_ANSWER_TEXT, score
    return value, None


@dataclass
class AnswerImport:
    answers: list[Answer] = field(default_factory=list)
    created_students: list[Student] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def import_answers(
    text: str,
    exam_id: str,
    questions: Sequence[Question],
    resolver: StudentIdentityResolver,
) -> AnswerImport:
    """
    답안 CSV (학생 1명 = 1행, 문항 번호 = 컬럼) → Answer 목록.

    학생은 resolver 로 찾고 없으면 만든다. 이름 없는 행은 건너뜀 (경고).
    빈 칸은 답안을 만들지 않는다.
    """
    out = AnswerImport()

    def warn(message: str) -> None:
        out.warnings.append(message)
        logger.warning("import_answers exam=%s: %s", exam_id, message)

    for line_no, row in enumerate(csv_to_objects(text), start=2):
        name = row.get(COL_NAME, "")
        if not name:
            warn(f"{line_no}행: 이름이 없어 건너뜀")
            continue

        student, created = resolver.find_or_create(
            name, row.get(COL_SCHOOL, ""), row.get(COL_GRADE, "")
        )
        if created:
            out.created_students.append(student)

        for q in questions:
            value = row.get(str(q.number), "")
            if not value:
                continue

            answer = Answer(exam_id=exam_id, student_id=student.id, question_id=q.id)
            if q.is_essay:
                answer.answer_text, answer.score_received = parse_essay_cell(value, q.points)
            else:
                answer.answer_text = value
            out.answers.append(answer)

    logger.info(
        "import_answers exam=%s answers=%s created_students=%s warnings=%s",
        exam_id,
        len(out.answers),
        len(out.created_students),
        len(out.warnings),
    )
    return out


def export_answers(
    exam: Exam,
    questions: Sequence[Question],
    answers: Sequence[Answer],
    students: dict[str, Student],
    exported_at: Optional[datetime] = None,
) -> str:
    """학생별 1행. 서술형은 점수가 있으면 점수, 없으면 답안 텍스트. BOM 포함."""
    stamp = (exported_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")

    by_student: dict[str, dict[str, Answer]] = {}
    for a in answers:
        by_student.setdefault(a.student_id, {})[a.question_id] = a

    number_columns = [str(q.number) for q in questions]
    headers = [COL_ENTERED_AT, COL_EXAM_NAME, COL_NAME, COL_SCHOOL, COL_GRADE] + number_columns

    rows = []
    for student_id, answer_map in by_student.items():
        student = students.get(student_id)
        if student is None:
            logger.warning("export_answers exam=%s: missing student=%s", exam.id, student_id)
            continue
        row: dict[str, Any] = {
            COL_ENTERED_AT: stamp,
            COL_EXAM_NAME: exam.name,
            COL_NAME: student.name,
            COL_SCHOOL: student.school,
            COL_GRADE: student.grade,
        }
        for q in questions:
            a = answer_map.get(q.id)
            if a is None:
                cell = ""
            elif q.is_essay and a.score_received is not None:
                cell = format_number(a.score_received)
            else:
                cell = a.answer_text
            row[str(q.number)] = cell
        rows.append(row)

    return with_bom(objects_to_csv(rows, headers))


# ======================================================
# 성적
# ======================================================
def domain_score_column(domain: str) -> str:
    return f"{domain}_점수"


def domain_max_column(domain: str) -> str:
    return f"{domain}_만점"


def export_results(results: Sequence[ExamResult]) -> str:
    """학생별 1행 + 영역별 (점수, 만점) 컬럼 쌍. 점수는 소수 둘째 자리. BOM 포함."""
    domains: list[str] = []
    for r in results:
        for domain in r.domain_scores:
            if domain not in domains:
                domains.append(domain)

    headers = list(RESULT_HEADERS)
    for domain in domains:
        headers += [domain_score_column(domain), domain_max_column(domain)]

    rows = []
    for r in results:
        row: dict[str, Any] = {
            COL_EXAM_NAME: r.exam.name,
            COL_NAME: r.student.name,
            COL_SCHOOL: r.student.school,
            COL_GRADE: r.student.grade,
            COL_TOTAL: f"{r.total_score:.2f}",
            COL_MAX: format_number(float(r.max_score)),
            COL_OBJECTIVE_SCORE: f"{r.objective_score:.2f}",
            COL_ESSAY_SCORE: f"{r.essay_score:.2f}",
            COL_RANK: r.rank,
            COL_COHORT: r.total_students,
            COL_WRONG_NUMBERS: ",".join(str(n) for n in r.wrong_question_numbers),
        }
        for domain, ds in r.domain_scores.items():
            row[domain_score_column(domain)] = f"{ds.score:.2f}"
            row[domain_max_column(domain)] = format_number(float(ds.max_score))
        rows.append(row)

    return with_bom(objects_to_csv(rows, headers))
