from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, fetchone
from .model import Payslip
from .repository import PayrollRepository


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def latest_for_user(self, user_id: str) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, month, year, basic_salary, hra, allowances, bonus,
                       deductions, tax, net_pay, pay_date, status
                FROM payroll
                WHERE user_id=%s
                ORDER BY year DESC, month DESC
                LIMIT 1
                """,
                (user_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Payslip(
                payslip_id=str(row["id"]),
                user_id=str(row["user_id"]),
                month=int(row["month"]),
                year=int(row["year"]),
                basic_salary=as_float(row["basic_salary"]) or 0.0,
                hra=as_float(row["hra"]) or 0.0,
                allowances=as_float(row["allowances"]) or 0.0,
                bonus=as_float(row["bonus"]) or 0.0,
                deductions=as_float(row["deductions"]) or 0.0,
                tax=as_float(row["tax"]) or 0.0,
                net_pay=as_float(row["net_pay"]) or 0.0,
                pay_date=as_date(row.get("pay_date")),
                status=row.get("status") or "pending",
            )
