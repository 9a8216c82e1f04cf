from __future__ import annotations

import asyncio
from typing import Optional

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from src.dayflow.dayflow.auth.backend import ALREADY_REGISTERED
from src.dayflow.dayflow.auth.events import SessionEvents
from src.dayflow.dayflow.auth.model import AccountRecord, Profile, SignupMetadata
from src.dayflow.dayflow.auth.mysql_backend import MySQLAuthBackend
from src.dayflow.dayflow.auth.store import SessionStore
from src.dayflow.dayflow.core.enums import Role
from src.dayflow.dayflow.core.exceptions import BackendError, ReentrantCallError


class FakeAccountsRepo:
    def __init__(self):
        self.records: dict[str, AccountRecord] = {}
        self.profiles: dict[str, Profile] = {}
        self.roles: dict[str, Role] = {}
        self.fail = False

    def add(self, user_id, email, password, role, *, must_change=False):
        self.records[email] = AccountRecord(
            user_id=user_id,
            email=email,
            password_hash=generate_password_hash(password),
            must_change_password=must_change,
        )
        self.profiles[user_id] = Profile(user_id=user_id, name=email.split("@")[0].title(), email=email)
        self.roles[user_id] = role

    def get_by_email(self, email) -> Optional[AccountRecord]:
        if self.fail:
            raise BackendError("Cannot connect to MySQL")
        return self.records.get(email)

    def create_account(self, *, email, password_hash, metadata: SignupMetadata):
        user_id = f"u-{len(self.records) + 1}"
        self.records[email] = AccountRecord(user_id=user_id, email=email, password_hash=password_hash)
        self.profiles[user_id] = Profile(user_id=user_id, name=metadata.name, email=email, phone=metadata.phone,
                                         company=metadata.company)
        self.roles[user_id] = metadata.role
        return user_id

    def get_profile(self, user_id):
        return self.profiles.get(user_id)

    def get_role(self, user_id):
        return self.roles.get(user_id)

    def update_password(self, user_id, *, password_hash):
        for email, rec in self.records.items():
            if rec.user_id == user_id:
                self.records[email] = AccountRecord(user_id=user_id, email=email, password_hash=password_hash)
                return True
        return False


@pytest.fixture
def repo() -> FakeAccountsRepo:
    r = FakeAccountsRepo()
    r.add("hr-1", "hr@dayflow.com", "password123", Role.HR)
    r.add("emp-1", "employee@dayflow.com", "password123", Role.EMPLOYEE, must_change=True)
    return r


def test_sign_in_checks_password_hash_and_emits_identity(repo):
    backend = MySQLAuthBackend(repo)
    seen = []
    backend.subscribe(seen.append)

    async def scenario():
        bad = await backend.sign_in("hr@dayflow.com", "wrong")
        good = await backend.sign_in("  HR@dayflow.com ", "password123")
        return bad, good

    bad, good = asyncio.run(scenario())
    assert bad.error == "Invalid login credentials"
    assert good.ok and good.identity.user_id == "hr-1"
    assert [i.user_id for i in seen] == ["hr-1"]


def test_sign_in_carries_rotation_flag(repo):
    backend = MySQLAuthBackend(repo)
    result = asyncio.run(backend.sign_in("employee@dayflow.com", "password123"))
    assert result.identity.must_change_password is True


def test_sign_in_reports_storage_failure_as_error(repo):
    repo.fail = True
    backend = MySQLAuthBackend(repo)
    result = asyncio.run(backend.sign_in("hr@dayflow.com", "password123"))
    assert result.error == "Cannot connect to MySQL"


def test_sign_up_rejects_taken_email_with_code(repo):
    backend = MySQLAuthBackend(repo)
    result = asyncio.run(backend.sign_up("hr@dayflow.com", "Secret123", SignupMetadata(name="X", role=Role.HR)))
    assert result.error_code == ALREADY_REGISTERED


def test_sign_up_provisions_profile_and_role(repo):
    backend = MySQLAuthBackend(repo)

    async def scenario():
        result = await backend.sign_up(
            "new@dayflow.com", "Secret123", SignupMetadata(name="New Person", role=Role.EMPLOYEE, phone="1")
        )
        profile = await backend.fetch_profile_by_identity(result.identity.user_id)
        role = await backend.fetch_role_by_identity(result.identity.user_id)
        return result, profile, role

    result, profile, role = asyncio.run(scenario())
    assert result.ok
    assert profile.name == "New Person"
    assert role == Role.EMPLOYEE
    assert check_password_hash(repo.records["new@dayflow.com"].password_hash, "Secret123")


def test_sign_out_without_session_reports_error(repo):
    backend = MySQLAuthBackend(repo)
    assert asyncio.run(backend.sign_out()).error == "No active session"


def test_update_password_requires_session_and_rehashes(repo):
    backend = MySQLAuthBackend(repo)

    async def scenario():
        anonymous = await backend.update_password("Newpass123")
        await backend.sign_in("employee@dayflow.com", "password123")
        updated = await backend.update_password("Newpass123")
        return anonymous, updated

    anonymous, updated = asyncio.run(scenario())
    assert anonymous.error == "Not signed in"
    assert updated.ok
    record = repo.records["employee@dayflow.com"]
    assert check_password_hash(record.password_hash, "Newpass123")
    assert record.must_change_password is False


def test_store_drives_real_backend_end_to_end(repo):
    backend = MySQLAuthBackend(repo)

    async def scenario():
        store = SessionStore(backend, settle_seconds=0)
        await store.start()
        result = await store.login("hr@dayflow.com", "password123")
        for _ in range(20):
            await asyncio.sleep(0)
        snap = store.snapshot()
        await store.logout()
        return result, snap, store.snapshot()

    result, during, after = asyncio.run(scenario())
    assert result.success
    assert during.role == Role.HR
    assert during.profile.name == "Hr"
    assert after.authenticated is False and after.role is None


def test_calls_during_dispatch_are_refused():
    events = SessionEvents()
    errors = []

    def listener(_identity):
        try:
            events.ensure_idle("fetch_role_by_identity")
        except ReentrantCallError as e:
            errors.append(e)

    events.subscribe(listener)
    events.emit(None)

    assert len(errors) == 1
    assert events.dispatching is False
    events.ensure_idle("fetch_role_by_identity")


def test_failing_listener_does_not_block_others():
    events = SessionEvents()
    seen = []

    def broken(_identity):
        raise RuntimeError("boom")

    events.subscribe(broken)
    unsubscribe = events.subscribe(seen.append)
    events.emit(None)
    unsubscribe()
    events.emit(None)

    assert seen == [None]
