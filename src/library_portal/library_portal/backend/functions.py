from __future__ import annotations

import json
import logging
from typing import Any, Dict

from supabase import FunctionsError

from ..core.exceptions import PrivilegedFunctionError
from .connection import BackendConnection

logger = logging.getLogger(__name__)

CREATE_STUDENT_FUNCTION = "create-student"
CREATE_ADMIN_FUNCTION = "create-admin"
DELETE_USER_FUNCTION = "delete-user"


def decode_function_body(raw: Any) -> Dict[str, Any]:
    """Normalize a function response to a dict; ``{error}`` bodies raise."""

    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw) if raw.strip() else {}
        except ValueError:
            raise PrivilegedFunctionError(f"Unexpected function response: {raw[:120]!r}")
    if not isinstance(raw, dict):
        raise PrivilegedFunctionError("Unexpected function response")
    if raw.get("error"):
        raise PrivilegedFunctionError(str(raw["error"]))
    return raw


class SupabaseAccountFunctions:
    """Gateway to the serverless account-management functions.

    The functions hold the service credential; we only forward the caller's token.
    """

    def __init__(self, conn_factory: BackendConnection):
        self._conn_factory = conn_factory

    def _invoke(self, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        client = self._conn_factory.connect()
        try:
            raw = client.functions.invoke(name, invoke_options={"body": body, "responseType": "json"})
        except FunctionsError as e:
            message = getattr(e, "message", None) or str(e)
            logger.warning("function %s failed: %s", name, message)
            raise PrivilegedFunctionError(message) from e
        return decode_function_body(raw)

    def create_account(self, *, function: str, email: str, password: str, full_name: str) -> str:
        data = self._invoke(function, {"email": email, "password": password, "full_name": full_name})
        user = data.get("user") or {}
        user_id = user.get("id") if isinstance(user, dict) else None
        if not user_id:
            raise PrivilegedFunctionError("User creation failed")
        return str(user_id)

    def delete_user(self, user_id: str) -> None:
        data = self._invoke(DELETE_USER_FUNCTION, {"user_id": user_id})
        if not data.get("success"):
            raise PrivilegedFunctionError("User deletion failed")
