from .base import *

DEBUG = True
ALLOWED_HOSTS = ["*"]

# 🔴 dev 는 별도 DB 서버 없이 sqlite 파일 사용 (DB_ENGINE 으로 덮어쓰기 가능)
if os.getenv("DB_ENGINE") is None:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": str(BASE_DIR / "gradebook.sqlite3"),
        }
    }

LOGGING["root"]["level"] = os.getenv("LOG_LEVEL", "DEBUG")
