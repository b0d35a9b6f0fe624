"""
학생 식별 정규화 유틸리티

이름/학교/학년 표기 흔들림 흡수:
- 입력: " 김 민수", "서울고등학교", "1 학년 1반"
- 출력: "김민수", "서울고", "1"
"""

from .normalizer import (
    IDENTITY_KEY_DELIMITER,
    identity_key,
    normalize_grade,
    normalize_name,
    normalize_school,
)

__all__ = [
    "IDENTITY_KEY_DELIMITER",
    "identity_key",
    "normalize_grade",
    "normalize_name",
    "normalize_school",
]
