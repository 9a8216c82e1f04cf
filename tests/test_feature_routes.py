from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from src.dayflow.dayflow.core.enums import LeaveStatus

from tests.fakes import EMPLOYEE_ID, PASSWORD


@pytest.fixture(autouse=True)
def settled_employee(accounts):
    account = accounts["employee@dayflow.com"]
    accounts["employee@dayflow.com"] = replace(account, identity=replace(account.identity, must_change_password=False))


def _login(client, email):
    resp = client.post("/login", data={"email": email, "password": PASSWORD})
    assert resp.status_code == 302


def test_employee_dashboard_shows_profile_and_payroll(client, container, sample_payslip):
    container.payroll_repo.slips[EMPLOYEE_ID] = sample_payslip
    _login(client, "employee@dayflow.com")

    resp = client.get("/employee/dashboard")
    assert resp.status_code == 200
    assert b"John" in resp.data
    assert b"$5,250.00" in resp.data


def test_check_in_and_out_through_the_dashboard(client, container):
    _login(client, "employee@dayflow.com")

    resp = client.post("/employee/attendance/check-in")
    assert resp.status_code == 302
    assert container.attendance_repo.get_for_user_and_date(EMPLOYEE_ID, date.today()) is not None

    client.post("/employee/attendance/check-in")
    resp = client.get("/employee/dashboard")
    assert b"already checked in" in resp.data

    client.post("/employee/attendance/check-out")
    record = container.attendance_repo.get_for_user_and_date(EMPLOYEE_ID, date.today())
    assert record.check_out is not None


def test_employee_attendance_month_page(client):
    _login(client, "employee@dayflow.com")
    assert client.get("/employee/attendance?month=2026-01").status_code == 200
    assert client.get("/employee/attendance?month=garbage").status_code == 200


def test_leave_request_is_reviewed_by_hr(client, container):
    container.leave_repo.add_balance(EMPLOYEE_ID, 2026)
    _login(client, "employee@dayflow.com")
    resp = client.post(
        "/employee/leave",
        data={"leave_type": "sick", "start_date": "2026-02-02", "end_date": "2026-02-03", "reason": "Flu"},
    )
    assert resp.status_code == 302
    (request_id,) = container.leave_repo.requests
    client.get("/logout")

    _login(client, "hr@dayflow.com")
    resp = client.get("/hr/dashboard?tab=time-off")
    assert resp.status_code == 200
    assert b"Flu" in resp.data

    resp = client.post(f"/hr/leave/{request_id}/approve", data={"review_notes": "Get well"})
    assert resp.status_code == 302
    assert container.leave_repo.get(request_id=request_id).status == LeaveStatus.APPROVED
    assert container.leave_repo.get_balance(user_id=EMPLOYEE_ID, year=2026).sick_used == 2


def test_bad_leave_dates_are_reported(client, container):
    _login(client, "employee@dayflow.com")
    client.post("/employee/leave", data={"leave_type": "sick", "start_date": "tomorrow", "end_date": ""})
    resp = client.get("/employee/dashboard")
    assert b"YYYY-MM-DD" in resp.data
    assert container.leave_repo.requests == {}


def test_hr_directory_search(client):
    _login(client, "hr@dayflow.com")
    resp = client.get("/hr/dashboard?q=design")
    assert resp.status_code == 200
    assert b"Emily Chen" in resp.data
    assert b"John Smith" not in resp.data


def test_hr_attendance_day_view(client):
    _login(client, "hr@dayflow.com")
    resp = client.get("/hr/attendance?date=2026-01-05&q=john")
    assert resp.status_code == 200
    assert b"John Smith" in resp.data


def test_profile_update_refreshes_session(client, container):
    _login(client, "employee@dayflow.com")
    resp = client.post("/employee/profile", data={"phone": "555-0199", "department": "Platform", "position": ""})
    assert resp.status_code == 302
    assert container.employees_repo.updates == [(EMPLOYEE_ID, "555-0199", "Platform", None)]
    assert client.get("/employee/profile").status_code == 200



def test_role_homes_are_the_only_dashboards(client):
    _login(client, "hr@dayflow.com")
    assert client.get("/hr/dashboard").status_code == 200
    assert client.get("/dashboard").status_code == 404
