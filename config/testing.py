import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "staff_attendance_test"),
}

QR_SECRET = "test-qr-secret"
QR_ACCESS_PIN = "0000"

DEFAULT_REGULAR_RATE = "18.50"
DEFAULT_OVERTIME_RATE = "27.75"
DASHBOARD_NOMINAL_RATE = "18.50"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
