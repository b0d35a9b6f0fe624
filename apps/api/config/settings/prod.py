# PATH: apps/api/config/settings/prod.py
from .base import *
import os

# ==================================================
# PROD MODE (운영자 명령 실행 기준)
# ==================================================

DEBUG = False

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "")
if not SECRET_KEY:
    raise RuntimeError("DJANGO_SECRET_KEY must be set in prod.")

# ==================================================
# DATABASE
# ==================================================
# 운영은 postgresql 고정

if DATABASES["default"]["ENGINE"] != "django.db.backends.postgresql":
    raise RuntimeError("prod must use postgresql (unset DB_ENGINE).")

DATABASES["default"]["CONN_MAX_AGE"] = int(os.getenv("DB_CONN_MAX_AGE", "60"))

# ==================================================
# FINAL ASSERTIONS (운영 안정성)
# ==================================================

assert DEBUG is False, "prod.py must run with DEBUG=False"
