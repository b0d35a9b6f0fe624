# PATH: apps/domains/records/management/commands/merge_duplicate_students.py
"""
정규화 키(이름+학교+학년)가 같은 중복 학생 검사 및 병합.

그룹마다 답안이 가장 많은 학생을 남기고 나머지 답안을 이전한 뒤 삭제.
같은 (시험, 문항) 답안이 겹치면 병합 정책이 고른 쪽만 남는다.

사용:
  python manage.py merge_duplicate_students                          # 중복만 검사
  python manage.py merge_duplicate_students --dry-run                # 병합 계획만 출력
  python manage.py merge_duplicate_students --fix                    # 병합 실행
  python manage.py merge_duplicate_students --fix --policy keep_most_recent
"""
from django.core.management.base import BaseCommand, CommandError

from gradebook.adapters.db.django.uow import DjangoUnitOfWork
from gradebook.application.use_cases.students.batch_merge import (
    merge_duplicate_groups,
    plan_merges,
)
from gradebook.application.use_cases.students.merge_policy import (
    MERGE_POLICIES,
    get_merge_policy,
)
from gradebook.domain.records.errors import InvalidArgumentError
from gradebook.domain.shared.result import Err


class Command(BaseCommand):
    help = "정규화 키가 같은 중복 학생 검사 및 병합 (--fix 시 그룹당 1명만 유지)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="병합 계획만 출력, 실제 병합 없음",
        )
        parser.add_argument(
            "--fix",
            action="store_true",
            help="중복 그룹을 답안이 가장 많은 학생으로 병합",
        )
        parser.add_argument(
            "--policy",
            default=None,
            help=f"답안 충돌 시 병합 정책 ({', '.join(MERGE_POLICIES)})",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        do_fix = options["fix"]

        policy = None
        if options["policy"]:
            try:
                policy = get_merge_policy(options["policy"])
            except InvalidArgumentError as e:
                raise CommandError(str(e)) from e

        uow = DjangoUnitOfWork()
        plans = plan_merges(uow)
        if not plans:
            self.stdout.write(self.style.SUCCESS("중복 학생 없음."))
            return

        total_sources = sum(len(p.sources) for p in plans)
        self.stdout.write(
            self.style.WARNING(
                f"중복 그룹 {len(plans)}건, 병합 시 삭제될 학생: {total_sources}명"
            )
        )
        for p in plans[:10]:
            t = p.target
            self.stdout.write(
                f"  {t.student.name!r} ({t.student.school} {t.student.grade}) "
                f"대상={t.student.id} 답안={t.answer_count} 시험={t.exam_count} "
                f"병합={[s.student.id for s in p.sources]}"
            )
        if len(plans) > 10:
            self.stdout.write(f"  ... 외 {len(plans) - 10}개 그룹")

        if dry_run:
            self.stdout.write(self.style.WARNING("--dry-run: 실제 병합하지 않음. 병합하려면 --fix 를 사용하세요."))
            return

        if not do_fix:
            self.stdout.write(
                self.style.NOTICE("병합하려면 --fix 옵션을 붙여 다시 실행하세요.")
            )
            return

        report = merge_duplicate_groups(uow, policy=policy)
        for m in report.merges:
            if isinstance(m, Err):
                self.stderr.write(self.style.ERROR(f"  병합 실패 [{m.code}] {m.message}"))

        discarded = sum(len(m.value.discarded) for m in report.merges if not isinstance(m, Err))
        self.stdout.write(
            self.style.SUCCESS(
                f"병합 완료: 성공 {report.succeeded}건, 실패 {report.failed}건, "
                f"버려진 중복 답안 {discarded}건, 답안 없는 학생 삭제 {report.removed_students}명"
            )
        )
