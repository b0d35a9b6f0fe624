"""
학생 식별 키 정규화 모듈

중복 학생 판별용 (이름, 학교, 학년) 정규화:
- 이름: 공백 전부 제거
- 학교: 공백 제거 + "고등학교"/"고교" → "고"
- 학년: 공백 제거 + 반 표기(1반) 제거 + "학년" 제거

모든 함수는 예외를 던지지 않는다 (None/빈값 → "").
"""

import re
from typing import Any

# 정규화된 값에는 나올 수 없는 제어문자 (Unit Separator)
IDENTITY_KEY_DELIMITER = "\x1f"

_WHITESPACE = re.compile(r"\s+")
_HIGH_SCHOOL_SUFFIX = re.compile(r"고등학교|고교")
_CLASS_SUFFIX = re.compile(r"\d*반")
_GRADE_SUFFIX = re.compile(r"학년")


def _sub_until_stable(pattern: re.Pattern, repl: str, s: str) -> str:
    # 치환 결과가 다시 패턴을 만들 수 있음 ("고등학교교" → "고교")
    prev = None
    while prev != s:
        prev = s
        s = pattern.sub(repl, s)
    return s


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    return value.strip()


def normalize_name(name: Any) -> str:
    """
    학생 이름 정규화

    Examples:
        >>> normalize_name(" 김 민수 ")
        '김민수'
        >>> normalize_name(None)
        ''
    """
    return _WHITESPACE.sub("", _as_text(name))


def normalize_school(school: Any) -> str:
    """
    학교명 정규화

    Examples:
        >>> normalize_school("서울 고등학교")
        '서울고'
        >>> normalize_school("서울고교")
        '서울고'
    """
    s = _WHITESPACE.sub("", _as_text(school))
    return _sub_until_stable(_HIGH_SCHOOL_SUFFIX, "고", s)


def normalize_grade(grade: Any) -> str:
    """
    학년 정규화. 반 번호는 학년 비교에서 제외한다.

    Examples:
        >>> normalize_grade("1 학년 1반")
        '1'
        >>> normalize_grade("1학년")
        '1'
        >>> normalize_grade(2)
        '2'
    """
    s = _WHITESPACE.sub("", _as_text(grade))
    s = _sub_until_stable(_CLASS_SUFFIX, "", s)
    return _sub_until_stable(_GRADE_SUFFIX, "", s)


def identity_key(name: Any, school: Any, grade: Any) -> str:
    """
    중복 판별 키

    Examples:
        >>> identity_key("김민수", "서울고등학교", "1학년") == identity_key(" 김 민수", "서울고교", "1 학년 1반")
        True
    """
    return IDENTITY_KEY_DELIMITER.join(
        (normalize_name(name), normalize_school(school), normalize_grade(grade))
    )
