from __future__ import annotations

import re
import uuid
from datetime import date
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection


def _connect(db_config: dict, *, with_database: bool = True):
    return DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False
    lines = [ln for ln in sql.splitlines() if not ln.strip().startswith("--")]

    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_accounts(db_config: dict) -> None:
    """Create the HR and employee demo accounts if they are missing.

    The employee account is flagged for password rotation so the first login
    goes through the change-password screen.
    """
    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_account(*, name: str, email: str, password: str, role: str, department: str,
                           position: str, must_change_password: bool, basic_salary: float) -> None:
            cur.execute("SELECT id FROM accounts WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                return

            user_id = str(uuid.uuid4())
            cur.execute(
                """
                INSERT INTO accounts (id, email, password_hash, must_change_password)
                VALUES (%s, %s, %s, %s)
                """,
                (user_id, email, generate_password_hash(password), int(must_change_password)),
            )
            cur.execute(
                """
                INSERT INTO profiles (id, user_id, name, email, department, position, company, employee_id)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (str(uuid.uuid4()), user_id, name, email, department, position, "Dayflow",
                 f"EMP-{user_id[:8].upper()}"),
            )
            cur.execute(
                "INSERT INTO user_roles (id, user_id, role) VALUES (%s, %s, %s)",
                (str(uuid.uuid4()), user_id, role),
            )
            cur.execute(
                "INSERT INTO leave_balances (id, user_id, year) VALUES (%s, %s, %s)",
                (str(uuid.uuid4()), user_id, date.today().year),
            )
            hra = round(basic_salary * 0.2, 2)
            allowances = 300.0
            tax = round(basic_salary * 0.1, 2)
            cur.execute(
                """
                INSERT INTO payroll (id, user_id, month, year, basic_salary, hra, allowances, bonus,
                                     deductions, tax, net_pay, pay_date, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s, 0, 0, %s, %s, %s, 'paid')
                """,
                (str(uuid.uuid4()), user_id, date.today().month, date.today().year, basic_salary, hra,
                 allowances, tax, basic_salary + hra + allowances - tax, date.today().replace(day=1)),
            )

        upsert_account(
            name="Sarah Johnson",
            email="hr@dayflow.com",
            password="password123",
            role="HR",
            department="Human Resources",
            position="HR Manager",
            must_change_password=False,
            basic_salary=5200.0,
        )
        upsert_account(
            name="John Smith",
            email="employee@dayflow.com",
            password="password123",
            role="EMPLOYEE",
            department="Engineering",
            position="Software Developer",
            must_change_password=True,
            basic_salary=4500.0,
        )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
