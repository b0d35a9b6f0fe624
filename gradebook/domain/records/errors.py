"""
레코드 도메인 오류 — 순수 파이썬
"""
from __future__ import annotations


class RecordDomainError(Exception):
    """시험/문항/학생/답안 도메인 규칙 위반 등."""
    pass


class InvalidArgumentError(RecordDomainError, ValueError):
    """자기 자신과 병합, 알 수 없는 정책명 등."""
    pass


class RecordNotFoundError(RecordDomainError, LookupError):
    """레코드가 저장소에 없음."""
    pass


class MergeFailedError(RecordDomainError):
    """병합 도중 저장소 오류. 트랜잭션은 롤백됨."""
    pass
