from types import SimpleNamespace

import pytest
from supabase import PostgrestAPIError

from conftest import FakeAuthGateway, InMemoryProfiles, InMemoryRoles
from library_portal.backend.base import backend_client
from library_portal.core.enums import Role
from library_portal.core.exceptions import AuthenticationError, BackendError, SessionExpiredError
from library_portal.users.model import SessionUser
from library_portal.users.service import AuthService

EXPIRES_AT = 1_800_000_000


def _user(refresh_token="refresh-u1", expires_at=EXPIRES_AT):
    return SessionUser(
        user_id="u1",
        email="ann@example.com",
        full_name="Ann Lee",
        role=Role.STUDENT,
        access_token="token-u1",
        refresh_token=refresh_token,
        expires_at=expires_at,
    )


def _service(auth=None):
    return AuthService(auth or FakeAuthGateway(), InMemoryProfiles(), InMemoryRoles())


def test_fresh_token_is_kept():
    auth = FakeAuthGateway()
    user, no_expiry = _user(), _user(expires_at=None)

    assert _service(auth).renew(user, now=EXPIRES_AT - 3600) is user
    assert _service(auth).renew(no_expiry, now=EXPIRES_AT + 3600) is no_expiry
    assert auth.refreshed == []


def test_expiring_token_is_swapped():
    auth = FakeAuthGateway()

    renewed = _service(auth).renew(_user(), now=EXPIRES_AT - 30)

    assert auth.refreshed == ["refresh-u1"]
    assert renewed.access_token == "renewed-1"
    assert renewed.refresh_token == "refresh-u1-1"
    assert renewed.expires_at > EXPIRES_AT
    assert (renewed.user_id, renewed.role) == ("u1", Role.STUDENT)


def test_expired_session_without_refresh_token():
    with pytest.raises(SessionExpiredError):
        _service().renew(_user(refresh_token=None), now=EXPIRES_AT + 1)


def test_revoked_refresh_token_ends_session():
    auth = FakeAuthGateway()
    auth.revoked_refresh_tokens.add("refresh-u1")

    with pytest.raises(AuthenticationError, match="session has expired"):
        _service(auth).renew(_user(), now=EXPIRES_AT + 1)


class StubConnection:
    def connect(self):
        return SimpleNamespace()


def _api_error(message, code):
    return PostgrestAPIError({"message": message, "code": code, "hint": None, "details": None})


def test_expired_jwt_from_backend_is_a_session_error():
    with pytest.raises(SessionExpiredError):
        with backend_client(StubConnection()):
            raise _api_error("JWT expired", "PGRST303")


def test_other_backend_errors_stay_backend_errors():
    with pytest.raises(BackendError, match="permission denied"):
        with backend_client(StubConnection()):
            raise _api_error("permission denied for table attendance", "42501")
