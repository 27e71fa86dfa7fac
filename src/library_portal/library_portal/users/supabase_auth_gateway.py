from __future__ import annotations

import logging
from typing import ContextManager, Optional

from supabase import AuthError

from ..backend.connection import BackendConnection
from ..core.exceptions import AuthenticationError, SessionExpiredError
from .model import AuthIdentity

logger = logging.getLogger(__name__)


class SupabaseAuthGateway:
    """Password auth against the backend; this app never issues its own tokens."""

    def __init__(self, conn_factory: BackendConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _identity(response, fallback_email: str) -> AuthIdentity:
        user = getattr(response, "user", None)
        if user is None:
            raise AuthenticationError("Authentication failed")
        session = getattr(response, "session", None)
        return AuthIdentity(
            user_id=str(user.id),
            email=getattr(user, "email", None) or fallback_email,
            access_token=getattr(session, "access_token", None),
            refresh_token=getattr(session, "refresh_token", None),
            expires_at=getattr(session, "expires_at", None),
        )

    def sign_up(self, *, email: str, password: str, full_name: str) -> AuthIdentity:
        client = self._conn_factory.connect()
        try:
            response = client.auth.sign_up(
                {"email": email, "password": password, "options": {"data": {"full_name": full_name}}}
            )
        except AuthError as e:
            raise AuthenticationError(getattr(e, "message", None) or str(e)) from e
        return self._identity(response, email)

    def sign_in(self, *, email: str, password: str) -> AuthIdentity:
        client = self._conn_factory.connect()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            raise AuthenticationError(getattr(e, "message", None) or str(e)) from e
        return self._identity(response, email)

    def refresh(self, refresh_token: str) -> AuthIdentity:
        client = self._conn_factory.connect()
        try:
            response = client.auth.refresh_session(refresh_token)
        except AuthError as e:
            logger.info("session refresh failed: %s", e)
            raise SessionExpiredError() from e
        user = getattr(response, "user", None)
        if user is None or getattr(response, "session", None) is None:
            raise SessionExpiredError()
        return self._identity(response, getattr(user, "email", None) or "")

    def sign_out(self, access_token: str) -> None:
        client = self._conn_factory.connect()
        try:
            client.auth.admin.sign_out(access_token)
        except AuthError as e:
            # The local session is cleared regardless.
            logger.info("sign-out on backend failed: %s", e)

    def acting_as(self, access_token: Optional[str]) -> ContextManager[None]:
        return self._conn_factory.as_user(access_token)
