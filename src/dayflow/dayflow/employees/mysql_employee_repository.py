from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import EmployeeRow
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_directory(self) -> Sequence[EmployeeRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.user_id, p.name, p.email, p.department, p.position, p.phone, p.employee_id,
                       r.role
                FROM profiles p
                LEFT JOIN user_roles r ON r.user_id = p.user_id
                ORDER BY p.name
                """
            )
            return [
                EmployeeRow(
                    user_id=str(r["user_id"]),
                    name=r["name"],
                    email=r["email"],
                    role=Role(r["role"]) if r.get("role") else None,
                    department=r.get("department"),
                    position=r.get("position"),
                    phone=r.get("phone"),
                    employee_id=r.get("employee_id"),
                )
                for r in fetchall(cur)
            ]

    def update_profile(
        self,
        user_id: str,
        *,
        phone: Optional[str],
        department: Optional[str],
        position: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET phone=%s, department=%s, position=%s WHERE user_id=%s",
                (phone, department, position, user_id),
            )
            return cur.rowcount > 0
