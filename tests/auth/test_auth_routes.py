from __future__ import annotations

from dataclasses import replace

import pytest

from src.dayflow.dayflow.core.constants import ALREADY_REGISTERED_MESSAGE
from src.dayflow.dayflow.main import create_app

from tests.fakes import PASSWORD


def _login(client, email, password=PASSWORD):
    return client.post("/login", data={"email": email, "password": password})


@pytest.fixture
def settled_employee(accounts):
    """The demo employee with the password rotation already done."""
    account = accounts["employee@dayflow.com"]
    accounts["employee@dayflow.com"] = replace(account, identity=replace(account.identity, must_change_password=False))
    return accounts["employee@dayflow.com"]


def test_root_redirects_to_login(client):
    resp = client.get("/")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")


def test_login_page_renders(client):
    resp = client.get("/login")
    assert resp.status_code == 200
    assert b"<form" in resp.data


def test_protected_page_redirects_anonymous_user_to_login(client):
    resp = client.get("/hr/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")


def test_login_returns_to_remembered_path(client):
    client.get("/hr/attendance")
    resp = _login(client, "hr@dayflow.com")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/hr/attendance")


def test_login_lands_on_role_home(client):
    resp = _login(client, "hr@dayflow.com")
    assert resp.headers["Location"].endswith("/hr/dashboard")
    assert client.get("/hr/dashboard").status_code == 200


def test_invalid_login_shows_error(client):
    resp = _login(client, "hr@dayflow.com", "nope")
    assert resp.status_code == 200
    assert b"Invalid login credentials" in resp.data
    assert client.get("/hr/dashboard").status_code == 302


def test_authenticated_user_visiting_login_is_sent_home(client):
    _login(client, "hr@dayflow.com")
    resp = client.get("/login")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/hr/dashboard")


def test_first_login_is_forced_through_password_change(client):
    resp = _login(client, "employee@dayflow.com")
    assert resp.headers["Location"].endswith("/change-password")

    resp = client.get("/employee/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/change-password")

    assert client.get("/change-password").status_code == 200


def test_password_change_rejects_mismatch(client):
    _login(client, "employee@dayflow.com")
    resp = client.post(
        "/change-password",
        data={"current_password": PASSWORD, "new_password": "Newpass123", "confirm_password": "Other123"},
    )
    assert resp.status_code == 200
    assert b"New passwords do not match" in resp.data


def test_password_change_rejects_weak_password(client):
    _login(client, "employee@dayflow.com")
    resp = client.post(
        "/change-password",
        data={"current_password": PASSWORD, "new_password": "weakpass", "confirm_password": "weakpass"},
    )
    assert resp.status_code == 200
    assert b"Please meet all password requirements" in resp.data


def test_password_change_releases_the_gate(client, accounts):
    _login(client, "employee@dayflow.com")
    resp = client.post(
        "/change-password",
        data={"current_password": PASSWORD, "new_password": "Newpass123", "confirm_password": "Newpass123"},
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/employee/dashboard")
    assert client.get("/employee/dashboard").status_code == 200
    assert accounts["employee@dayflow.com"].password == "Newpass123"


def test_employee_is_kept_out_of_hr_pages(client, settled_employee):
    _login(client, "employee@dayflow.com")
    resp = client.get("/hr/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/employee/dashboard")


def test_hr_is_kept_out_of_employee_pages(client):
    _login(client, "hr@dayflow.com")
    resp = client.get("/employee/attendance")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/hr/dashboard")


def test_logout_ends_the_session(client):
    _login(client, "hr@dayflow.com")
    resp = client.get("/logout")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
    assert client.get("/hr/dashboard").status_code == 302


def test_signup_creates_account_and_requires_new_password(client, accounts):
    resp = client.post(
        "/signup",
        data={
            "name": "Ada Lovelace",
            "email": "ada@dayflow.com",
            "password": "Secret123",
            "company": "Dayflow",
            "phone": "555-0100",
            "role": "EMPLOYEE",
        },
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/change-password")
    assert "ada@dayflow.com" in accounts


def test_signup_with_taken_email_shows_friendly_message(client):
    resp = client.post(
        "/signup",
        data={"name": "Dup", "email": "hr@dayflow.com", "password": "Secret123", "role": "HR"},
    )
    assert resp.status_code == 200
    assert ALREADY_REGISTERED_MESSAGE.encode() in resp.data


def test_signup_validates_input(client):
    resp = client.post("/signup", data={"name": "", "email": "x@dayflow.com", "password": "Secret123"})
    assert resp.status_code == 200
    assert b"Name is required" in resp.data


def test_unknown_page_is_404(client):
    assert client.get("/nowhere").status_code == 404


def test_anonymous_visitors_do_not_accumulate_clients(container):
    app = create_app(container)
    for _ in range(50):
        assert app.test_client().get("/login").status_code == 200
    assert len(container.sessions) == 0

    browser = app.test_client()
    assert _login(browser, "hr@dayflow.com").status_code == 302
    assert len(container.sessions) == 1

    browser.get("/logout")
    assert len(container.sessions) == 0


def test_anonymous_protected_request_does_not_create_client(client, container):
    assert client.get("/employee/dashboard").status_code == 302
    assert len(container.sessions) == 0


def test_failed_login_does_not_keep_client(client, container):
    _login(client, "hr@dayflow.com", "wrong")
    _login(client, "nobody@dayflow.com", "wrong")
    assert len(container.sessions) == 0


def test_logout_after_relogin_leaves_no_client(client, container):
    _login(client, "hr@dayflow.com")
    client.get("/logout")
    _login(client, "hr@dayflow.com")
    assert len(container.sessions) == 1
    client.get("/logout")
    assert len(container.sessions) == 0
    assert client.get("/hr/dashboard").status_code == 302
