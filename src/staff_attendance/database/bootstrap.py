from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must work regardless of the configured database name
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside quotes; ``--`` comment lines are dropped."""
    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    buf: list[str] = []
    quote = ""
    escape = False

    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            escape = True
        elif ch in ("'", '"'):
            if not quote:
                quote = ch
            elif quote == ch:
                quote = ""
        elif ch == ";" and not quote:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    ensure_database_exists(conn_factory)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s to %s", Path(schema_path).name, conn_factory.config.describe())


def ensure_demo_data(db_config: dict, *, access_pin: str = "") -> None:
    """Create demo accounts and the QR config singleton (idempotent)."""
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(employee_id: str, full_name: str, email: str, password: str, role: str, position: str) -> None:
            cur.execute(
                """
                INSERT INTO user_profiles(employee_id, full_name, email, password_hash, role, position, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name), password_hash=VALUES(password_hash),
                    role=VALUES(role), position=VALUES(position), is_active=1
                """,
                (employee_id, full_name, email, generate_password_hash(password), role, position),
            )

        upsert_user("EMP001", "Admin Demo", "admin@example.com", "admin123", "admin", "Owner")
        upsert_user("EMP002", "Manager Demo", "manager@example.com", "manager123", "manager", "Bar Manager")
        upsert_user("EMP003", "Employee Demo", "employee@example.com", "employee123", "employee", "Bartender")

        cur.execute("SELECT config_id FROM qr_attendance_config ORDER BY config_id LIMIT 1")
        pin_hash = generate_password_hash(access_pin) if access_pin else None
        if cur.fetchone() is None:
            cur.execute(
                """
                INSERT INTO qr_attendance_config(organization_name, qr_code_prefix, work_start_time, work_end_time, access_pin_hash)
                VALUES(%s,%s,%s,%s,%s)
                """,
                ("Demo Organization", "ATT", "09:00:00", "17:00:00", pin_hash),
            )
        elif pin_hash:
            cur.execute("UPDATE qr_attendance_config SET access_pin_hash=%s", (pin_hash,))

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo data ready on %s", conn_factory.config.describe())


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
