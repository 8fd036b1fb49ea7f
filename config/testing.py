import os

from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

DB_BACKEND = os.getenv("DB_BACKEND", "sqlite").lower()
SQLITE_PATH = os.getenv("SQLITE_PATH", "visit_tracker_test.db")

AUTO_INIT_DB = True
AUTO_SEED_DB = False
