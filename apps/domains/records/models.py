# PATH: apps/domains/records/models.py
"""
레코드 저장소 ORM 모델 (gradebook.adapters.db.django 에서만 접근)

- uid: 도메인 엔티티 id (문자열). row_id 는 저장 순서 보존용
- 답안의 시험/학생/문항 참조는 FK 가 아닌 uid 문자열:
  고아 답안과 중복 답안이 존재할 수 있어야 정리 작업이 의미를 가진다
- 타임스탬프는 도메인이 정한 값을 그대로 저장 (auto_now 미사용, 병합/중복 정리가 updated_at 에 의존)
"""
from django.db import models
from django.utils import timezone


class RecordModel(models.Model):
    row_id = models.BigAutoField(primary_key=True)
    uid = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(default=timezone.now, null=True, blank=True)

    class Meta:
        abstract = True
        ordering = ["row_id"]


class Exam(RecordModel):
    name = models.CharField(max_length=255, blank=True, default="")
    organization = models.CharField(max_length=100, blank=True, default="")
    school = models.CharField(max_length=100, blank=True, default="")
    grade = models.CharField(max_length=50, blank=True, default="")
    date = models.CharField(max_length=50, blank=True, default="")
    series = models.CharField(max_length=100, blank=True, default="")  # 예: 1학기 중간
    updated_at = models.DateTimeField(default=timezone.now, null=True, blank=True)

    class Meta(RecordModel.Meta):
        db_table = "records_exam"

    def __str__(self):
        return self.name


class Question(RecordModel):
    exam_uid = models.CharField(max_length=64, db_index=True)
    number = models.IntegerField(default=0)
    type = models.CharField(max_length=20, default="객관식")
    domain = models.CharField(max_length=100, blank=True, default="")
    sub_domain = models.CharField(max_length=100, blank=True, default="")
    passage = models.CharField(max_length=255, blank=True, default="")
    points = models.FloatField(default=0.0)
    correct_answer = models.TextField(blank=True, default="")
    choice_explanations = models.JSONField(default=dict, blank=True)
    intent = models.TextField(blank=True, default="")

    class Meta(RecordModel.Meta):
        db_table = "records_question"

    def __str__(self):
        return f"{self.exam_uid} Q{self.number}"


class Student(RecordModel):
    name = models.CharField(max_length=50)
    school = models.CharField(max_length=100, blank=True, default="")
    grade = models.CharField(max_length=50, blank=True, default="")
    organization = models.CharField(max_length=100, blank=True, default="")

    class Meta(RecordModel.Meta):
        db_table = "records_student"
        indexes = [
            models.Index(fields=["name", "school", "grade"], name="records_stu_identity_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.school} {self.grade})"


class Answer(RecordModel):
    exam_uid = models.CharField(max_length=64, db_index=True)
    student_uid = models.CharField(max_length=64, db_index=True)
    question_uid = models.CharField(max_length=64)
    answer_text = models.TextField(blank=True, default="")
    score_received = models.FloatField(null=True, blank=True)  # 서술형 미채점 = NULL
    updated_at = models.DateTimeField(default=timezone.now, null=True, blank=True)

    class Meta(RecordModel.Meta):
        db_table = "records_answer"
        indexes = [
            models.Index(fields=["exam_uid", "student_uid"], name="records_ans_exam_student_idx"),
        ]

    def __str__(self):
        return f"{self.exam_uid}/{self.student_uid}/{self.question_uid}"
