"""
코어 설정 — 환경변수 기반 (Django settings 미의존)

Django 프로세스에서는 settings 모듈이 같은 환경변수를 읽는다.
"""
from __future__ import annotations

import os

# 학생 병합 시 같은 (시험, 문항) 답안 충돌 해결 정책. keep_target | keep_most_recent | keep_highest_score
MERGE_POLICY = os.getenv("GRADEBOOK_MERGE_POLICY", "keep_target")

# 시행/소속 기관 기본값
DEFAULT_ORGANIZATION = os.getenv("GRADEBOOK_DEFAULT_ORGANIZATION", "국어농장")
