# PATH: apps/domains/records/management/commands/cleanup_answers.py
"""
고아 답안(시험/학생/문항 없음) 삭제 후 중복 답안을 슬롯당 최신 1건으로 정리.

멱등. 입력이 잠잠할 때 cron 으로 실행해도 무방.

사용:
  python manage.py cleanup_answers
  python manage.py cleanup_answers --dry-run
"""
from django.core.management.base import BaseCommand

from gradebook.adapters.db.django.uow import DjangoUnitOfWork
from gradebook.application.use_cases.answers.cleanup import AnswerDeduplicator


class Command(BaseCommand):
    help = "고아 답안과 중복 답안을 정리합니다."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="실제 삭제 없이 대상 건수만 출력",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        report = AnswerDeduplicator(DjangoUnitOfWork()).run_all(dry_run=dry_run)

        if dry_run:
            self.stdout.write(
                self.style.WARNING(
                    f"--dry-run: 고아 답안 {report.orphaned}건, 중복 답안 {report.duplicates}건 (삭제하지 않음)"
                )
            )
            return

        self.stdout.write(
            self.style.SUCCESS(
                f"정리 완료: 고아 답안 {report.orphaned}건, 중복 답안 {report.duplicates}건 삭제"
            )
        )
