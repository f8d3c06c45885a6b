import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "staff_attendance"),
}

QR_SECRET = os.getenv("QR_SECRET", "please-set-QR_SECRET")
QR_ACCESS_PIN = os.getenv("QR_ACCESS_PIN", "")

DEFAULT_REGULAR_RATE = os.getenv("DEFAULT_REGULAR_RATE", "18.50")
DEFAULT_OVERTIME_RATE = os.getenv("DEFAULT_OVERTIME_RATE", "27.75")
DASHBOARD_NOMINAL_RATE = os.getenv("DASHBOARD_NOMINAL_RATE", "18.50")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
