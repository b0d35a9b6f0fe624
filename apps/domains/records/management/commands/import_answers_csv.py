# PATH: apps/domains/records/management/commands/import_answers_csv.py
"""
답안 CSV 가져오기 (학생 1명 = 1행, 문항 번호 = 컬럼).

학생은 이름/학교/학년으로 찾고 없으면 만든다.
같은 (학생, 문항) 답안은 덮어쓴다.

사용:
  python manage.py import_answers_csv EXAM_ID answers.csv
"""
from django.core.management.base import BaseCommand, CommandError

from gradebook.adapters.db.django.uow import DjangoUnitOfWork
from gradebook.application.services.csv_interchange import import_answers, read_csv_file
from gradebook.application.use_cases.answers.entry import save_answers
from gradebook.application.use_cases.students.identity import StudentIdentityResolver


class Command(BaseCommand):
    help = "답안 CSV 를 시험에 적재합니다."

    def add_arguments(self, parser):
        parser.add_argument("exam_id")
        parser.add_argument("path")

    def handle(self, *args, **options):
        exam_id = options["exam_id"]
        uow = DjangoUnitOfWork()

        if uow.exams.get(exam_id) is None:
            raise CommandError(f"시험이 없습니다: {exam_id}")
        questions = uow.questions.list_for_exam(exam_id)
        if not questions:
            raise CommandError(f"문항이 없습니다. 문항 CSV 를 먼저 적재하세요: {exam_id}")

        try:
            text = read_csv_file(options["path"])
        except OSError as e:
            raise CommandError(f"CSV 파일을 읽을 수 없습니다: {e}") from e

        with uow:
            parsed = import_answers(text, exam_id, questions, StudentIdentityResolver(uow))
            created = save_answers(uow, parsed.answers)

        for w in parsed.warnings:
            self.stdout.write(self.style.WARNING(f"  {w}"))
        self.stdout.write(
            self.style.SUCCESS(
                f"답안 적재 완료: {len(parsed.answers)}건 (신규 {created}건), "
                f"신규 학생 {len(parsed.created_students)}명, 경고 {len(parsed.warnings)}건"
            )
        )
