from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from staff_attendance.database.bootstrap import ensure_demo_data

logger = logging.getLogger("seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())

    ensure_demo_data(dict(settings.DB_CONFIG), access_pin=getattr(settings, "QR_ACCESS_PIN", ""))
    logger.info("Demo accounts: admin@example.com / manager@example.com / employee@example.com")


if __name__ == "__main__":
    main()
