import os

from config.config import *  # noqa: F401,F403
from config.config import _flag

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply the schema on startup (idempotent: CREATE ... IF NOT EXISTS)
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "1")
# Seed the admin account from ADMIN_NAME / ADMIN_PASSWORD
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
