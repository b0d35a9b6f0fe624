"""
성적표 포털 코어 — 채점/순위/학생 식별/CSV 교환 (Django 미사용)

domain      : 엔티티, 채점 엔진, 순위
application : 포트(Repository/UoW), Use Case, CSV 서비스
adapters    : 메모리 스냅샷 / Django ORM 레코드 저장소
"""
