# apps/domains/records/migrations/0001_initial.py
from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Exam",
            fields=[
                ("row_id", models.BigAutoField(primary_key=True, serialize=False)),
                ("uid", models.CharField(max_length=64, unique=True)),
                ("created_at", models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                ("organization", models.CharField(blank=True, default="", max_length=100)),
                ("school", models.CharField(blank=True, default="", max_length=100)),
                ("grade", models.CharField(blank=True, default="", max_length=50)),
                ("date", models.CharField(blank=True, default="", max_length=50)),
                ("series", models.CharField(blank=True, default="", max_length=100)),
                ("updated_at", models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
            ],
            options={
                "db_table": "records_exam",
                "ordering": ["row_id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("row_id", models.BigAutoField(primary_key=True, serialize=False)),
                ("uid", models.CharField(max_length=64, unique=True)),
                ("created_at", models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
                ("exam_uid", models.CharField(db_index=True, max_length=64)),
                ("number", models.IntegerField(default=0)),
                ("type", models.CharField(default="객관식", max_length=20)),
                ("domain", models.CharField(blank=True, default="", max_length=100)),
                ("sub_domain", models.CharField(blank=True, default="", max_length=100)),
                ("passage", models.CharField(blank=True, default="", max_length=255)),
                ("points", models.FloatField(default=0.0)),
                ("correct_answer", models.TextField(blank=True, default="")),
                ("choice_explanations", models.JSONField(blank=True, default=dict)),
                ("intent", models.TextField(blank=True, default="")),
            ],
            options={
                "db_table": "records_question",
                "ordering": ["row_id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Student",
            fields=[
                ("row_id", models.BigAutoField(primary_key=True, serialize=False)),
                ("uid", models.CharField(max_length=64, unique=True)),
                ("created_at", models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
                ("name", models.CharField(max_length=50)),
                ("school", models.CharField(blank=True, default="", max_length=100)),
                ("grade", models.CharField(blank=True, default="", max_length=50)),
                ("organization", models.CharField(blank=True, default="", max_length=100)),
            ],
            options={
                "db_table": "records_student",
                "ordering": ["row_id"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["name", "school", "grade"], name="records_stu_identity_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Answer",
            fields=[
                ("row_id", models.BigAutoField(primary_key=True, serialize=False)),
                ("uid", models.CharField(max_length=64, unique=True)),
                ("created_at", models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
                ("exam_uid", models.CharField(db_index=True, max_length=64)),
                ("student_uid", models.CharField(db_index=True, max_length=64)),
                ("question_uid", models.CharField(max_length=64)),
                ("answer_text", models.TextField(blank=True, default="")),
                ("score_received", models.FloatField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
            ],
            options={
                "db_table": "records_answer",
                "ordering": ["row_id"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["exam_uid", "student_uid"], name="records_ans_exam_student_idx"),
                ],
            },
        ),
    ]
