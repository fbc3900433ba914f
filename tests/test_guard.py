"""
Tests for the server route guard, called directly against a fake request.
"""
import asyncio
from types import SimpleNamespace

import pytest

from bizhub.config import settings
from bizhub.identity import SessionResolver
from bizhub.rbac.errors import (
    AccountInactive,
    EmployeeNotFound,
    PermissionDenied,
    RoleRequired,
    Unauthenticated,
    UpstreamFailure,
    localized_message,
)
from bizhub.rbac.guard import (
    build_user,
    load_current_user,
    require_permission,
    require_role,
)


class FakeRequest:
    """Just enough of a Starlette request for the guard."""

    def __init__(self, app_state, token=None):
        self.app = SimpleNamespace(state=app_state)
        self.cookies = {settings.access_cookie_name: token} if token else {}


@pytest.fixture
def state(provider, directory):
    return SimpleNamespace(
        session_resolver=SessionResolver(provider),
        employee_directory=directory,
    )


def run(coro):
    return asyncio.run(coro)


# =============================================================================
# require_permission
# =============================================================================

class TestRequirePermission:
    def test_grants_held_permission(self, state):
        user = run(require_permission("customers:view", FakeRequest(state, "tok-sales")))
        assert user.role_name == "sales"
        assert "customers:view" in user.permissions

    def test_missing_cookie_is_unauthenticated(self, state):
        with pytest.raises(Unauthenticated) as exc:
            run(require_permission("customers:view", FakeRequest(state)))
        assert exc.value.status_code == 401
        assert exc.value.detail == "Unauthorized"

    def test_missing_employee_record(self, state):
        with pytest.raises(EmployeeNotFound) as exc:
            run(require_permission("customers:view", FakeRequest(state, "tok-orphan")))
        assert exc.value.status_code == 404

    def test_inactive_checked_before_permission(self, state):
        # The inactive account holds customers:view, and still fails as inactive.
        with pytest.raises(AccountInactive) as exc:
            run(require_permission("customers:view", FakeRequest(state, "tok-inactive")))
        assert exc.value.detail == "Account is inactive"
        assert exc.value.status_code == 403

    def test_missing_permission(self, state):
        with pytest.raises(PermissionDenied) as exc:
            run(require_permission("customers:create", FakeRequest(state, "tok-sales")))
        assert exc.value.detail == "Permission denied: customers:create"
        assert exc.value.permission == "customers:create"

    def test_json_string_permissions(self, state):
        user = run(require_permission("customers:view", FakeRequest(state, "tok-json")))
        assert user.permissions == ["customers:view"]

    def test_malformed_json_permissions_deny_not_crash(self, state):
        with pytest.raises(PermissionDenied):
            run(require_permission("customers:view", FakeRequest(state, "tok-badjson")))

    def test_provider_outage_propagates(self, state, provider, upstream_failure):
        provider.fail_with = upstream_failure
        with pytest.raises(UpstreamFailure):
            run(require_permission("customers:view", FakeRequest(state, "tok-sales")))

    def test_data_store_outage_propagates(self, state, directory, upstream_failure):
        directory.fail_with = upstream_failure
        with pytest.raises(UpstreamFailure) as exc:
            run(require_permission("customers:view", FakeRequest(state, "tok-sales")))
        assert exc.value.status_code == 500

    def test_refetches_on_every_call(self, state, directory):
        request = FakeRequest(state, "tok-sales")
        run(require_permission("customers:view", request))
        run(require_permission("customers:view", request))
        assert directory.lookups == ["emp-sales", "emp-sales"]

    def test_data_store_role_wins_over_token_claim(self, state, directory):
        # Token still says "sales"; an administrator demoted the account.
        directory.add("emp-sales", "employee", ["dashboard:view"])
        with pytest.raises(PermissionDenied):
            run(require_permission("customers:view", FakeRequest(state, "tok-sales")))


class TestRequireRole:
    def test_matching_role(self, state):
        user = run(require_role("admin", FakeRequest(state, "tok-admin")))
        assert user.role_name == "admin"

    def test_other_role(self, state):
        with pytest.raises(RoleRequired):
            run(require_role("admin", FakeRequest(state, "tok-sales")))


class TestLoadCurrentUser:
    def test_inactive_user_still_loads(self, state):
        user = run(load_current_user(FakeRequest(state, "tok-inactive")))
        assert user.is_active is False


# =============================================================================
# Helpers
# =============================================================================

class TestBuildUser:
    def test_missing_role_defaults_to_employee(self):
        user = build_user({"id": "e1", "name": "A"})
        assert user.role_name == "employee"
        assert user.permissions == []
        assert user.is_active is True

    def test_flattens_role(self):
        user = build_user({
            "id": "e1",
            "role_id": "r1",
            "is_active": False,
            "role": {"id": "r1", "name": "sales", "permissions": ["customers.read"]},
        })
        assert user.role_name == "sales"
        assert user.permissions == ["customers:view"]
        assert user.is_active is False

    def test_non_string_scalars_coerced(self):
        user = build_user({"id": 7, "role_id": 3, "name": 42, "position": None})
        assert user.id == "7"
        assert user.role_id == "3"
        assert user.name == "42"
        assert user.position is None


class TestLocalizedMessage:
    def test_default_message(self):
        assert localized_message(PermissionDenied("x:y")) == "Không có quyền truy cập"

    def test_override_by_kind(self):
        overrides = {PermissionDenied: "Không có quyền tạo khách hàng"}
        assert localized_message(PermissionDenied("x:y"), overrides) == "Không có quyền tạo khách hàng"
        assert localized_message(AccountInactive(), overrides) == "Tài khoản đã bị vô hiệu hóa"
