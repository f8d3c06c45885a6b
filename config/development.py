import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "staff_attendance"),
}

# Signs the daily attendance QR code
QR_SECRET = os.getenv("QR_SECRET", "dev-qr-secret")
# Seeded into qr_attendance_config.access_pin_hash by scripts/seed_db.py
QR_ACCESS_PIN = os.getenv("QR_ACCESS_PIN", "1234")

# Payroll page defaults (per hour)
DEFAULT_REGULAR_RATE = os.getenv("DEFAULT_REGULAR_RATE", "18.50")
DEFAULT_OVERTIME_RATE = os.getenv("DEFAULT_OVERTIME_RATE", "27.75")
# Dashboard salary estimate
DASHBOARD_NOMINAL_RATE = os.getenv("DASHBOARD_NOMINAL_RATE", "18.50")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo users and the QR config row on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
