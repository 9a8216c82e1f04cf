from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AccountRecord, Profile, SignupMetadata
from .repository import AccountRepository


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[AccountRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, email, password_hash, must_change_password
                FROM accounts
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return AccountRecord(
                user_id=str(row["id"]),
                email=row["email"],
                password_hash=row["password_hash"],
                must_change_password=bool(row.get("must_change_password", False)),
            )

    def create_account(self, *, email: str, password_hash: str, metadata: SignupMetadata) -> str:
        user_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO accounts(id, email, password_hash, must_change_password) VALUES(%s,%s,%s,0)",
                (user_id, email, password_hash),
            )
            cur.execute(
                """
                INSERT INTO profiles(id, user_id, name, email, phone, company, employee_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    str(uuid.uuid4()),
                    user_id,
                    metadata.name,
                    email,
                    metadata.phone,
                    metadata.company,
                    f"EMP-{user_id[:8].upper()}",
                ),
            )
            cur.execute(
                "INSERT INTO user_roles(id, user_id, role) VALUES(%s,%s,%s)",
                (str(uuid.uuid4()), user_id, metadata.role.value),
            )
            cur.execute(
                "INSERT INTO leave_balances(id, user_id, year) VALUES(%s,%s,%s)",
                (str(uuid.uuid4()), user_id, date.today().year),
            )
        return user_id

    def get_profile(self, user_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, email, avatar_url, department, position, phone, company, employee_id
                FROM profiles
                WHERE user_id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Profile(
                user_id=str(row["user_id"]),
                name=row["name"],
                email=row["email"],
                avatar_url=row.get("avatar_url"),
                department=row.get("department"),
                position=row.get("position"),
                phone=row.get("phone"),
                company=row.get("company"),
                employee_id=row.get("employee_id"),
            )

    def get_role(self, user_id: str) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE user_id=%s ORDER BY created_at LIMIT 1", (user_id,))
            row = fetchone(cur)
            if not row:
                return None
            return Role(row["role"])

    def update_password(self, user_id: str, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE accounts SET password_hash=%s, must_change_password=0 WHERE id=%s",
                (password_hash, user_id),
            )
            return cur.rowcount > 0
