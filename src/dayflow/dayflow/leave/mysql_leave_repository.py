from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import LeaveBalance, LeaveRequest
from .repository import LeaveRepository

_BALANCE_COLUMNS = {
    LeaveType.VACATION: "vacation_used",
    LeaveType.SICK: "sick_used",
    LeaveType.PERSONAL: "personal_used",
}


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> str:
        request_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(id, user_id, leave_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,'pending')
                """,
                (request_id, user_id, leave_type.value, start_date, end_date, reason),
            )
        return request_id

    def get(self, *, request_id: str) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, leave_type, start_date, end_date, reason, status, created_at,
                       reviewed_by, reviewed_at, review_notes
                FROM leave_requests
                WHERE id=%s
                """,
                (request_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return LeaveRequest(
                request_id=str(row["id"]),
                user_id=str(row["user_id"]),
                leave_type=LeaveType(row["leave_type"]),
                start_date=as_date(row["start_date"]),
                end_date=as_date(row["end_date"]),
                reason=row.get("reason"),
                status=LeaveStatus(row["status"]),
                created_at=row["created_at"],
                reviewed_by=row.get("reviewed_by"),
                reviewed_at=row.get("reviewed_at"),
                review_notes=row.get("review_notes"),
            )

    def list_requests(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        user_id: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        where = []
        params: list = []
        if status is not None:
            where.append("lr.status=%s")
            params.append(status.value)
        if user_id is not None:
            where.append("lr.user_id=%s")
            params.append(user_id)
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT lr.id, lr.user_id, p.name, lr.leave_type, lr.start_date, lr.end_date,
                       lr.reason, lr.status, lr.review_notes, lr.created_at
                FROM leave_requests lr
                LEFT JOIN profiles p ON p.user_id = lr.user_id
                {where_sql}
                ORDER BY lr.created_at DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                {
                    "request_id": str(r["id"]),
                    "user_id": str(r["user_id"]),
                    "name": r.get("name") or "-",
                    "leave_type": r["leave_type"],
                    "start_date": as_date(r["start_date"]),
                    "end_date": as_date(r["end_date"]),
                    "reason": r.get("reason") or "",
                    "status": r["status"],
                    "review_notes": r.get("review_notes") or "",
                }
                for r in fetchall(cur)
            ]

    def decide(
        self,
        *,
        request_id: str,
        status: LeaveStatus,
        reviewed_by: Optional[str],
        review_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_notes=%s
                WHERE id=%s AND status='pending'
                """,
                (status.value, reviewed_by, datetime.now(), review_notes, request_id),
            )
            return cur.rowcount > 0

    def get_balance(self, *, user_id: str, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, year, vacation_days, vacation_used, sick_days, sick_used,
                       personal_days, personal_used
                FROM leave_balances
                WHERE user_id=%s AND year=%s
                """,
                (user_id, int(year)),
            )
            row = fetchone(cur)
            if not row:
                return None
            return LeaveBalance(
                user_id=str(row["user_id"]),
                year=int(row["year"]),
                vacation_days=int(row["vacation_days"]),
                vacation_used=int(row["vacation_used"]),
                sick_days=int(row["sick_days"]),
                sick_used=int(row["sick_used"]),
                personal_days=int(row["personal_days"]),
                personal_used=int(row["personal_used"]),
            )

    def consume_balance(self, *, user_id: str, year: int, leave_type: LeaveType, days: int) -> bool:
        column = _BALANCE_COLUMNS.get(leave_type)
        if column is None:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE leave_balances SET {column} = {column} + %s WHERE user_id=%s AND year=%s",
                (int(days), user_id, int(year)),
            )
            return cur.rowcount > 0
