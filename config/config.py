"""Settings shared by every environment; the per-environment modules override these."""
import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Server timestamps are local wall-clock time in this zone
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata")

# "mysql" or "sqlite"
DB_BACKEND = os.getenv("DB_BACKEND", "mysql").lower()
DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "visit_tracker"),
}
SQLITE_PATH = os.getenv("SQLITE_PATH", "visit_tracker.db")

AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
ADMIN_NAME = os.getenv("ADMIN_NAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
GEOCODING_TIMEOUT_SECONDS = float(os.getenv("GEOCODING_TIMEOUT_SECONDS", "10"))

SMTP_HOST = os.getenv("SMTP_HOST", "in-v3.mailjet.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL", "no-reply@example.com")
SMTP_USE_TLS = _flag("SMTP_USE_TLS", "1")
