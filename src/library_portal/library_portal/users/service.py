from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..backend.functions import CREATE_ADMIN_FUNCTION, CREATE_STUDENT_FUNCTION
from ..common.validators import (
    optional_text,
    require_int_range,
    require_min_length,
    require_text,
    require_non_empty,
)
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    SessionExpiredError,
    ValidationError,
)
from ..timeslots.repository import TimeSlotRepository
from ..timeslots.service import parse_slots
from .model import NewStudent, Profile, SessionUser
from .repository import AccountFunctions, AuthGateway, ProfileRepository, RoleRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
TOKEN_REFRESH_MARGIN_SECONDS = 60


class AuthService:
    """Use case: sign up, sign in (student or admin), sign out."""

    def __init__(self, auth: AuthGateway, profiles: ProfileRepository, roles: RoleRepository):
        self._auth = auth
        self._profiles = profiles
        self._roles = roles

    def sign_up(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        student_id: str,
        phone: Optional[str] = None,
    ) -> str:
        full_name = require_non_empty(full_name, "Full name")
        email = require_non_empty(email, "Email")
        student_id = require_non_empty(student_id, "Student ID")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        identity = self._auth.sign_up(email=email, password=password, full_name=full_name)
        if not identity.access_token:
            logger.info("sign-up for %s returned no session (email confirmation pending)", email)

        # The profile row is created by the backend on sign-up; we only fill it in.
        with self._auth.acting_as(identity.access_token):
            self._profiles.update_fields(
                identity.user_id, {"student_id": student_id, "phone": optional_text(phone, "Phone")}
            )
            self._roles.assign(identity.user_id, Role.STUDENT)
        return identity.user_id

    def login(self, *, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email")
        if not require_text(password, "Password"):
            raise ValidationError("Password is required")

        identity = self._auth.sign_in(email=email, password=password)
        if not identity.access_token:
            raise AuthenticationError("Authentication failed")

        with self._auth.acting_as(identity.access_token):
            role = self._roles.get_role(identity.user_id)
            if role is None:
                logger.warning("user %s has no role row; treating as student", identity.user_id)
                role = Role.STUDENT
            profile = self._profiles.get_by_id(identity.user_id)

        return SessionUser(
            user_id=identity.user_id,
            email=identity.email,
            full_name=profile.full_name if profile else identity.email,
            role=role,
            access_token=identity.access_token,
            refresh_token=identity.refresh_token,
            expires_at=identity.expires_at,
        )

    def renew(self, user: SessionUser, *, now: Optional[float] = None) -> SessionUser:
        """Swap tokens that are about to expire; ``user`` comes back unchanged otherwise."""

        if user.expires_at is None:
            return user
        now = time.time() if now is None else now
        if now < user.expires_at - TOKEN_REFRESH_MARGIN_SECONDS:
            return user
        if not user.refresh_token:
            raise SessionExpiredError()

        identity = self._auth.refresh(user.refresh_token)
        if not identity.access_token:
            raise SessionExpiredError()
        logger.info("renewed session for %s", user.user_id)
        return replace(
            user,
            access_token=identity.access_token,
            refresh_token=identity.refresh_token or user.refresh_token,
            expires_at=identity.expires_at,
        )

    def admin_login(self, *, email: str, password: str) -> SessionUser:
        user = self.login(email=email, password=password)
        if not user.is_admin:
            self._auth.sign_out(user.access_token)
            raise AuthorizationError("Access denied. Admin credentials required.")
        return user

    def logout(self, user: Optional[SessionUser]) -> None:
        if user is not None:
            self._auth.sign_out(user.access_token)


class ProfileService:
    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def get(self, user_id: str) -> Profile:
        profile = self._profiles.get_by_id(user_id)
        if not profile:
            raise ValidationError("Profile not found")
        return profile

    def update_profile(self, user_id: str, *, full_name: str, phone: Optional[str]) -> Profile:
        full_name = require_non_empty(full_name, "Full name")
        self._profiles.update_fields(user_id, {"full_name": full_name, "phone": optional_text(phone, "Phone")})
        return self.get(user_id)

    def update_goal(self, user_id: str, goal) -> int:
        value = require_int_range(goal, "Attendance goal", low=1)
        self._profiles.update_fields(user_id, {"attendance_goal": value})
        return value


class AccountAdminService:
    """Use case: admins manage student and admin accounts.

    Account creation and deletion run in privileged functions; the profile
    upsert and time-slot insert afterwards are not transactional with them.
    """

    def __init__(
        self,
        profiles: ProfileRepository,
        roles: RoleRepository,
        functions: AccountFunctions,
        slots: TimeSlotRepository,
    ):
        self._profiles = profiles
        self._roles = roles
        self._functions = functions
        self._slots = slots

    def _list_role(self, role: Role) -> Sequence[Profile]:
        user_ids = self._roles.list_user_ids(role)
        if not user_ids:
            return []
        return self._profiles.list_by_ids(user_ids)

    def list_students(self) -> Sequence[Profile]:
        return self._list_role(Role.STUDENT)

    def list_admins(self) -> Sequence[Profile]:
        return self._list_role(Role.ADMIN)

    def count_students(self) -> int:
        return self._roles.count(Role.STUDENT)

    def create_student(
        self,
        student: NewStudent,
        *,
        time_slots: Optional[Iterable[Mapping[str, object]]] = None,
    ) -> str:
        full_name = require_non_empty(student.full_name, "Full name")
        email = require_non_empty(student.email, "Email")
        student_id = require_non_empty(student.student_id, "Student ID")
        require_min_length(student.password, "Password", MIN_PASSWORD_LENGTH)
        slots = parse_slots(time_slots)

        user_id = self._functions.create_account(
            function=CREATE_STUDENT_FUNCTION,
            email=email,
            password=student.password,
            full_name=full_name,
        )
        self._profiles.upsert(
            user_id=user_id,
            full_name=full_name,
            email=email,
            student_id=student_id,
            seat_number=optional_text(student.seat_number, "Seat number"),
            phone=optional_text(student.phone, "Phone"),
        )
        if slots:
            self._slots.insert_many(user_id, slots)
        logger.info("created student %s (%s) with %d time slot(s)", user_id, email, len(slots))
        return user_id

    def create_admin(self, *, full_name: str, email: str, password: str) -> str:
        full_name = require_non_empty(full_name, "Full name")
        email = require_non_empty(email, "Email")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        user_id = self._functions.create_account(
            function=CREATE_ADMIN_FUNCTION,
            email=email,
            password=password,
            full_name=full_name,
        )
        self._profiles.upsert(user_id=user_id, full_name=full_name, email=email)
        logger.info("created admin %s (%s)", user_id, email)
        return user_id

    def delete_user(self, *, current: SessionUser, user_id: str) -> None:
        if not current.is_admin:
            raise AuthorizationError(redirect_to=current.role.landing_page)
        if not user_id:
            raise ValidationError("User id is required")
        if user_id == current.user_id:
            raise ValidationError("You cannot delete your own account")
        self._functions.delete_user(user_id)
        logger.info("deleted user %s", user_id)


def profile_to_dict(profile: Profile) -> Dict[str, object]:
    return {
        "id": profile.user_id,
        "full_name": profile.full_name,
        "email": profile.email,
        "phone": profile.phone,
        "student_id": profile.student_id,
        "seat_number": profile.seat_number,
        "attendance_goal": profile.attendance_goal,
        "created_at": profile.created_at.isoformat() if profile.created_at else None,
    }


def profiles_to_dicts(profiles: Iterable[Profile]) -> List[Dict[str, object]]:
    return [profile_to_dict(p) for p in profiles]
