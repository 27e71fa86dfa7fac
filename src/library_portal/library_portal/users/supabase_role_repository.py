from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..backend.base import backend_client, fetchall, fetchcount, fetchone
from ..backend.connection import BackendConnection
from ..core.enums import Role
from .repository import RoleRepository

logger = logging.getLogger(__name__)


class SupabaseRoleRepository(RoleRepository):
    def __init__(self, conn_factory: BackendConnection):
        self._conn_factory = conn_factory

    def get_role(self, user_id: str) -> Optional[Role]:
        with backend_client(self._conn_factory, action="user_roles.get") as client:
            response = client.table("user_roles").select("role").eq("user_id", user_id).limit(1).execute()
            row = fetchone(response)
        if not row:
            return None
        try:
            return Role(row["role"])
        except ValueError:
            logger.warning("unknown role %r for user %s", row.get("role"), user_id)
            return None

    def list_user_ids(self, role: Role) -> Sequence[str]:
        with backend_client(self._conn_factory, action="user_roles.list") as client:
            response = client.table("user_roles").select("user_id").eq("role", role.value).execute()
            return [str(r["user_id"]) for r in fetchall(response)]

    def count(self, role: Role) -> int:
        with backend_client(self._conn_factory, action="user_roles.count") as client:
            response = (
                client.table("user_roles")
                .select("*", count="exact", head=True)
                .eq("role", role.value)
                .execute()
            )
            return fetchcount(response)

    def assign(self, user_id: str, role: Role) -> None:
        with backend_client(self._conn_factory, action="user_roles.assign") as client:
            client.table("user_roles").insert({"user_id": user_id, "role": role.value}).execute()
