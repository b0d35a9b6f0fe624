# PATH: apps/domains/records/management/commands/export_exam_csv.py
"""
시험 문항/답안/성적 CSV 내보내기 (UTF-8 + BOM).

사용:
  python manage.py export_exam_csv EXAM_ID questions out.csv
  python manage.py export_exam_csv EXAM_ID answers out.csv
  python manage.py export_exam_csv EXAM_ID results out.csv
"""
from django.core.management.base import BaseCommand, CommandError

from gradebook.adapters.db.django.uow import DjangoUnitOfWork
from gradebook.application.services.csv_interchange import (
    export_answers,
    export_questions,
    export_results,
    write_csv_file,
)
from gradebook.application.use_cases.results.report import get_all_exam_results

KINDS = ("questions", "answers", "results")


class Command(BaseCommand):
    help = "시험 데이터를 CSV 로 내보냅니다."

    def add_arguments(self, parser):
        parser.add_argument("exam_id")
        parser.add_argument("kind", choices=KINDS)
        parser.add_argument("path")

    def handle(self, *args, **options):
        exam_id = options["exam_id"]
        kind = options["kind"]
        uow = DjangoUnitOfWork()

        exam = uow.exams.get(exam_id)
        if exam is None:
            raise CommandError(f"시험이 없습니다: {exam_id}")
        questions = uow.questions.list_for_exam(exam_id)

        if kind == "questions":
            text = export_questions(questions, exam.name)
            rows = len(questions)
        elif kind == "answers":
            answers = uow.answers.list_for_exam(exam_id)
            students = {}
            for a in answers:
                if a.student_id not in students:
                    s = uow.students.get(a.student_id)
                    if s is not None:
                        students[s.id] = s
            text = export_answers(exam, questions, answers, students)
            rows = len(students)
        else:
            results = get_all_exam_results(uow, exam_id)
            text = export_results(results)
            rows = len(results)

        try:
            path = write_csv_file(options["path"], text)
        except OSError as e:
            raise CommandError(f"CSV 파일을 쓸 수 없습니다: {e}") from e

        self.stdout.write(self.style.SUCCESS(f"{kind} 내보내기 완료: {rows}행 → {path}"))
