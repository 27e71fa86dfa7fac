from __future__ import annotations

from typing import ContextManager, Dict, Iterable, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import AuthIdentity, Profile, StudentIdentity


class ProfileRepository(Protocol):
    """Profiles are owned by the backend; we only read and write through it."""

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_by_ids(self, user_ids: Iterable[str]) -> Sequence[Profile]:
        raise NotImplementedError

    def get_identities(self, user_ids: Iterable[str]) -> Dict[str, StudentIdentity]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        user_id: str,
        full_name: str,
        email: str,
        student_id: Optional[str] = None,
        seat_number: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def update_fields(self, user_id: str, fields: Dict[str, object]) -> None:
        raise NotImplementedError


class RoleRepository(Protocol):
    def get_role(self, user_id: str) -> Optional[Role]:
        raise NotImplementedError

    def list_user_ids(self, role: Role) -> Sequence[str]:
        raise NotImplementedError

    def count(self, role: Role) -> int:
        raise NotImplementedError

    def assign(self, user_id: str, role: Role) -> None:
        raise NotImplementedError


class AuthGateway(Protocol):
    def sign_up(self, *, email: str, password: str, full_name: str) -> AuthIdentity:
        raise NotImplementedError

    def sign_in(self, *, email: str, password: str) -> AuthIdentity:
        raise NotImplementedError

    def refresh(self, refresh_token: str) -> AuthIdentity:
        raise NotImplementedError

    def sign_out(self, access_token: str) -> None:
        raise NotImplementedError

    def acting_as(self, access_token: Optional[str]) -> ContextManager[None]:
        """Scope backend calls to a freshly issued token (before a session exists)."""

        raise NotImplementedError


class AccountFunctions(Protocol):
    def create_account(self, *, function: str, email: str, password: str, full_name: str) -> str:
        raise NotImplementedError

    def delete_user(self, user_id: str) -> None:
        raise NotImplementedError
