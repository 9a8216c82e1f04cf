from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.guard import RouteGuard
from .auth.mysql_account_repository import MySQLAccountRepository
from .auth.mysql_backend import MySQLAuthBackend
from .auth.registry import SessionRegistry
from .auth.repository import AccountRepository
from .common.loop import BackgroundLoop
from .core.constants import DEFAULT_BACKEND_TIMEOUT_SECONDS, DEFAULT_SIGNUP_SETTLE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    loop: BackgroundLoop

    accounts_repo: AccountRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leave_repo: LeaveRepository
    payroll_repo: PayrollRepository

    sessions: SessionRegistry
    route_guard: RouteGuard
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    accounts_repo: AccountRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leave_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    backend_factory=None,
    settle_seconds: float = DEFAULT_SIGNUP_SETTLE_SECONDS,
    backend_timeout: float = DEFAULT_BACKEND_TIMEOUT_SECONDS,
) -> Container:
    """Wire services around already-built repositories."""
    loop = BackgroundLoop(timeout=backend_timeout)
    sessions = SessionRegistry(
        backend_factory=backend_factory or (lambda: MySQLAuthBackend(accounts_repo)),
        loop=loop,
        settle_seconds=settle_seconds,
    )

    return Container(
        conn=conn,
        loop=loop,
        accounts_repo=accounts_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        payroll_repo=payroll_repo,
        sessions=sessions,
        route_guard=RouteGuard(),
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(attendance_repo),
        leave_service=LeaveService(leave_repo),
        payroll_service=PayrollService(payroll_repo),
    )


def build_container(
    *,
    db_config: dict,
    settle_seconds: float = DEFAULT_SIGNUP_SETTLE_SECONDS,
    backend_timeout: float = DEFAULT_BACKEND_TIMEOUT_SECONDS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        accounts_repo=MySQLAccountRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        settle_seconds=settle_seconds,
        backend_timeout=backend_timeout,
    )
