import os

os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from dailyupdates.settings import *  # noqa: E402,F401,F403

LOGGING["root"]["level"] = "WARNING"  # noqa: F405
