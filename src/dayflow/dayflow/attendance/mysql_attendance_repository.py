from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, fetchall, fetchone
from .model import AttendanceDayRow, AttendanceRecord
from .repository import AttendanceRepository


def _to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(row["id"]),
        user_id=str(row["user_id"]),
        work_date=as_date(row["date"]),
        check_in=row.get("check_in"),
        check_out=row.get("check_out"),
        total_hours=as_float(row.get("total_hours")),
        status=AttendanceStatus(row.get("status") or AttendanceStatus.PRESENT.value),
        notes=row.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, date, check_in, check_out, total_hours, status, notes
                FROM attendance
                WHERE user_id=%s AND date=%s
                """,
                (user_id, work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def create_checkin(
        self,
        *,
        user_id: str,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> str:
        record_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance(id, user_id, date, check_in, status) VALUES(%s,%s,%s,%s,%s)",
                (record_id, user_id, work_date, check_in, status.value),
            )
        return record_id

    def update_checkout(self, *, record_id: str, check_out: datetime, total_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET check_out=%s, total_hours=%s WHERE id=%s AND check_out IS NULL",
                (check_out, round(total_hours, 2), record_id),
            )
            return cur.rowcount > 0

    def list_for_user_between(self, user_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, date, check_in, check_out, total_hours, status, notes
                FROM attendance
                WHERE user_id=%s AND date BETWEEN %s AND %s
                ORDER BY date
                """,
                (user_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceDayRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.user_id, p.name, a.check_in, a.check_out, a.total_hours
                FROM profiles p
                JOIN user_roles r ON r.user_id = p.user_id AND r.role = 'EMPLOYEE'
                LEFT JOIN attendance a ON a.user_id = p.user_id AND a.date = %s
                ORDER BY p.name
                """,
                (work_date,),
            )
            return [
                AttendanceDayRow(
                    user_id=str(r["user_id"]),
                    name=r["name"],
                    check_in=r.get("check_in"),
                    check_out=r.get("check_out"),
                    total_hours=as_float(r.get("total_hours")),
                )
                for r in fetchall(cur)
            ]
