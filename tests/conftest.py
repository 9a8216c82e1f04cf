from __future__ import annotations

import os
from datetime import date, datetime

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.dayflow.dayflow.container import assemble
from src.dayflow.dayflow.main import create_app
from src.dayflow.dayflow.payroll.model import Payslip

from tests.fakes import (
    EMPLOYEE_ID,
    FakeAuthBackend,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryLeaves,
    InMemoryPayroll,
    default_accounts,
)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 5, 9, 0, 0)


@pytest.fixture
def backend() -> FakeAuthBackend:
    return FakeAuthBackend()


@pytest.fixture
def sample_payslip() -> Payslip:
    return Payslip(
        payslip_id="p-1",
        user_id=EMPLOYEE_ID,
        month=1,
        year=2026,
        basic_salary=4500.0,
        hra=900.0,
        allowances=300.0,
        bonus=0.0,
        deductions=0.0,
        tax=450.0,
        net_pay=5250.0,
        pay_date=date(2026, 1, 1),
        status="paid",
    )


@pytest.fixture
def accounts():
    return default_accounts()


@pytest.fixture
def container(accounts):
    c = assemble(
        conn=None,
        accounts_repo=None,
        employees_repo=InMemoryEmployees(),
        attendance_repo=InMemoryAttendance(),
        leave_repo=InMemoryLeaves(),
        payroll_repo=InMemoryPayroll(),
        backend_factory=lambda: FakeAuthBackend(accounts),
        settle_seconds=0,
        backend_timeout=5,
    )
    yield c
    c.sessions.close_all()


@pytest.fixture
def client(container):
    app = create_app(container)
    app.config["TESTING"] = True
    return app.test_client()
