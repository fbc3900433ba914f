"""
Shared fixtures: in-memory identity provider and employee directory wired
into a fresh app through create_app().
"""
import json

import pytest
from fastapi.testclient import TestClient

from bizhub.app import create_app
from bizhub.config import settings
from bizhub.identity import AuthSession, Identity
from bizhub.rbac.catalog import ROLES
from bizhub.rbac.errors import InvalidCredentials, UpstreamFailure


# =============================================================================
# Fakes
# =============================================================================

class FakeIdentityProvider:
    """Maps access tokens to identities; can be told to fail."""

    def __init__(self):
        self.identities: dict[str, Identity] = {}
        self.passwords: dict[str, tuple[str, str]] = {}  # email -> (password, token)
        self.fail_with: Exception | None = None
        self.signed_out: list[str] = []
        self.get_user_calls = 0

    def add(self, token: str, identity: Identity, password: str | None = None):
        self.identities[token] = identity
        if password and identity.email:
            self.passwords[identity.email] = (password, token)

    async def get_user(self, access_token: str) -> Identity | None:
        self.get_user_calls += 1
        if self.fail_with:
            raise self.fail_with
        return self.identities.get(access_token)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        if self.fail_with:
            raise self.fail_with
        stored = self.passwords.get(email)
        if not stored or stored[0] != password:
            raise InvalidCredentials()
        token = stored[1]
        return AuthSession(
            access_token=token,
            refresh_token=f"refresh-{token}",
            expires_at=1_900_000_000,
            user=self.identities[token],
        )

    async def sign_out(self, access_token: str) -> None:
        if self.fail_with:
            raise self.fail_with
        self.signed_out.append(access_token)


class FakeDirectory:
    """Employee+role records keyed by employee id."""

    def __init__(self):
        self.records: dict[str, dict] = {}
        self.fail_with: Exception | None = None
        self.lookups: list[str] = []
        self.touched: list[str] = []

    def add(self, employee_id: str, role_name: str | None, permissions, **fields):
        record = {
            "id": employee_id,
            "name": fields.pop("name", employee_id),
            "email": fields.pop("email", f"{employee_id}@amtsc.vn"),
            "position": fields.pop("position", None),
            "department": fields.pop("department", None),
            "role_id": f"role-{role_name}" if role_name else None,
            "is_active": fields.pop("is_active", True),
            "created_at": "2024-01-01T00:00:00+00:00",
            "updated_at": "2024-06-01T00:00:00+00:00",
            **fields,
        }
        if role_name is not None:
            record["role"] = {
                "id": f"role-{role_name}",
                "name": role_name,
                "description": role_name,
                "permissions": permissions,
            }
        self.records[employee_id] = record

    async def find_with_role(self, employee_id: str):
        self.lookups.append(employee_id)
        if self.fail_with:
            raise self.fail_with
        record = self.records.get(employee_id)
        return json.loads(json.dumps(record)) if record else None

    async def touch_last_login(self, employee_id: str) -> None:
        if self.fail_with:
            raise self.fail_with
        self.touched.append(employee_id)


# =============================================================================
# Fixtures
# =============================================================================

def _identity(employee_id: str, role: str | None, email: str | None = None) -> Identity:
    return Identity(
        id=employee_id,
        email=email or f"{employee_id}@amtsc.vn",
        app_metadata={"role": role} if role else {},
    )


@pytest.fixture
def provider():
    p = FakeIdentityProvider()
    p.add("tok-sales", _identity("emp-sales", "sales"), password="sales-pass")
    p.add("tok-employee", _identity("emp-employee", "employee"))
    p.add("tok-admin", _identity("emp-admin", "admin"))
    p.add("tok-inactive", _identity("emp-inactive", "admin"), password="inactive-pass")
    p.add("tok-orphan", _identity("emp-orphan", "sales"), password="orphan-pass")
    p.add("tok-json", _identity("emp-json", "sales"))
    p.add("tok-badjson", _identity("emp-badjson", "sales"))
    p.add("tok-noclaim", _identity("emp-noclaim", None))
    return p


@pytest.fixture
def directory():
    d = FakeDirectory()
    d.add("emp-sales", "sales", sorted(ROLES["sales"]), email="sales@amtsc.vn")
    d.add("emp-employee", "employee", list(ROLES["employee"]))
    d.add("emp-admin", "admin", list(ROLES["admin"]))
    d.add("emp-inactive", "admin", list(ROLES["admin"]), is_active=False)
    d.add("emp-json", "sales", '["customers:view"]')
    d.add("emp-badjson", "sales", "{bad")
    d.add("emp-noclaim", "employee", list(ROLES["employee"]))
    return d


@pytest.fixture
def app(provider, directory):
    return create_app(identity_provider=provider, employee_directory=directory)


@pytest.fixture
def client(app):
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def login_as(client):
    """Put a session cookie for ``token`` on the test client."""

    def _login(token: str) -> TestClient:
        client.cookies.set(settings.access_cookie_name, token)
        return client

    return _login


@pytest.fixture
def upstream_failure():
    return UpstreamFailure("provider down")
