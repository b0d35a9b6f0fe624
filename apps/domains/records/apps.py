from django.apps import AppConfig


class RecordsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.domains.records"

    # migration 참조용 앱 라벨 (변경 금지)
    label = "records"
    verbose_name = "Records (시험/문항/학생/답안)"
