# PATH: apps/domains/records/management/commands/import_questions_csv.py
"""
문항 CSV 가져오기.

시험이 없으면 CSV 의 시험명으로 새로 만든다.
같은 번호 문항은 덮어쓰기, --replace 면 기존 문항/답안을 지우고 다시 적재.

사용:
  python manage.py import_questions_csv EXAM_ID questions.csv
  python manage.py import_questions_csv EXAM_ID questions.csv --replace
"""
from django.core.management.base import BaseCommand, CommandError

from gradebook.adapters.db.django.uow import DjangoUnitOfWork
from gradebook.application.services.csv_interchange import import_questions, read_csv_file
from gradebook.application.use_cases.answers.entry import save_questions
from gradebook.domain.records.entities import Exam


class Command(BaseCommand):
    help = "문항 CSV 를 시험에 적재합니다."

    def add_arguments(self, parser):
        parser.add_argument("exam_id")
        parser.add_argument("path")
        parser.add_argument(
            "--replace",
            action="store_true",
            help="기존 문항과 그 답안을 삭제한 뒤 적재",
        )

    def handle(self, *args, **options):
        exam_id = options["exam_id"]
        try:
            text = read_csv_file(options["path"])
        except OSError as e:
            raise CommandError(f"CSV 파일을 읽을 수 없습니다: {e}") from e

        parsed = import_questions(text, exam_id)
        if not parsed.questions:
            raise CommandError("가져올 문항이 없습니다 (헤더 + 1행 이상 필요).")

        uow = DjangoUnitOfWork()
        with uow:
            if uow.exams.get(exam_id) is None:
                uow.exams.save(Exam(id=exam_id, name=parsed.exam_name or exam_id))
                self.stdout.write(f"시험 생성: {exam_id} ({parsed.exam_name or exam_id})")
            saved = save_questions(uow, exam_id, parsed.questions, replace=options["replace"])

        for w in parsed.warnings:
            self.stdout.write(self.style.WARNING(f"  {w}"))
        self.stdout.write(self.style.SUCCESS(f"문항 적재 완료: {saved}개 (경고 {len(parsed.warnings)}건)"))
