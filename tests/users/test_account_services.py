from types import SimpleNamespace

import pytest

from conftest import FakeAccountFunctions, FakeAuthGateway, InMemoryProfiles, InMemoryRoles, InMemorySlots
from library_portal.backend.functions import (
    CREATE_STUDENT_FUNCTION,
    SupabaseAccountFunctions,
    decode_function_body,
)
from library_portal.core.enums import Role
from library_portal.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    PrivilegedFunctionError,
    ValidationError,
)
from library_portal.users.model import NewStudent, Profile, SessionUser
from library_portal.users.service import AccountAdminService, AuthService, ProfileService


class RecordingRoles(InMemoryRoles):
    def __init__(self, auth, roles=None):
        super().__init__(roles)
        self._auth = auth
        self.assigned_with = []

    def assign(self, user_id, role):
        self.assigned_with.append(self._auth.active_token)
        super().assign(user_id, role)


def _admin(user_id="admin-1"):
    return SessionUser(user_id=user_id, email="a@example.com", full_name="Admin", role=Role.ADMIN, access_token="t")


def test_signup_writes_profile_and_role_as_new_user():
    auth = FakeAuthGateway()
    roles = RecordingRoles(auth)
    profiles = InMemoryProfiles()
    svc = AuthService(auth, profiles, roles)

    user_id = svc.sign_up(full_name="Ann Lee", email="ann@example.com", password="secret1", student_id="S-1")

    assert roles.roles[user_id] == Role.STUDENT
    assert roles.assigned_with == [f"token-{user_id}"]
    assert profiles.by_id[user_id].student_id == "S-1"
    assert auth.active_token is None


def test_signup_rejects_short_password():
    svc = AuthService(FakeAuthGateway(), InMemoryProfiles(), InMemoryRoles())
    with pytest.raises(ValidationError, match="at least 6"):
        svc.sign_up(full_name="Ann", email="ann@example.com", password="123", student_id="S-1")


def test_login_defaults_missing_role_to_student():
    auth = FakeAuthGateway()
    auth.add("ann@example.com", "secret1", "u1")
    profiles = InMemoryProfiles([Profile("u1", "Ann Lee", "ann@example.com")])
    svc = AuthService(auth, profiles, InMemoryRoles())

    user = svc.login(email="ann@example.com", password="secret1")

    assert user.role == Role.STUDENT
    assert user.full_name == "Ann Lee"
    assert SessionUser.from_session(user.to_session()) == user


def test_login_with_wrong_password():
    auth = FakeAuthGateway()
    auth.add("ann@example.com", "secret1", "u1")
    with pytest.raises(AuthenticationError):
        AuthService(auth, InMemoryProfiles(), InMemoryRoles()).login(email="ann@example.com", password="nope")


def test_admin_login_refuses_student_and_signs_out():
    auth = FakeAuthGateway()
    auth.add("ann@example.com", "secret1", "u1")
    svc = AuthService(auth, InMemoryProfiles(), InMemoryRoles({"u1": Role.STUDENT}))

    with pytest.raises(AuthorizationError, match="Admin credentials required"):
        svc.admin_login(email="ann@example.com", password="secret1")
    assert auth.signed_out == ["token-u1"]


def test_create_student_validates_slots_before_calling_function():
    functions = FakeAccountFunctions()
    svc = AccountAdminService(InMemoryProfiles(), InMemoryRoles(), functions, InMemorySlots())
    student = NewStudent(full_name="Ann", email="ann@example.com", password="secret1", student_id="S-1")

    with pytest.raises(ValidationError):
        svc.create_student(student, time_slots=[{"start": "10:00", "end": "09:00"}])
    assert functions.calls == []


def test_create_student_upserts_profile_and_slots():
    functions = FakeAccountFunctions()
    profiles = InMemoryProfiles()
    slots = InMemorySlots()
    svc = AccountAdminService(profiles, InMemoryRoles(), functions, slots)
    student = NewStudent(
        full_name="Ann", email="ann@example.com", password="secret1", student_id="S-1", seat_number=" A4 "
    )

    user_id = svc.create_student(
        student,
        time_slots=[{"start": "14:00", "end": "16:00"}, {"start": "", "end": ""}, {"start": "09:00", "end": "11:30"}],
    )

    assert functions.calls == [(CREATE_STUDENT_FUNCTION, "ann@example.com", "Ann")]
    assert profiles.by_id[user_id].seat_number == "A4"
    assert [s.label() for s in slots.list_for_user(user_id)] == ["09:00 - 11:30", "14:00 - 16:00"]


def test_create_student_surfaces_function_error():
    svc = AccountAdminService(
        InMemoryProfiles(), InMemoryRoles(), FakeAccountFunctions(fail_with="Email already registered"), InMemorySlots()
    )
    student = NewStudent(full_name="Ann", email="ann@example.com", password="secret1", student_id="S-1")
    with pytest.raises(PrivilegedFunctionError, match="already registered"):
        svc.create_student(student)


def test_delete_user_guards():
    functions = FakeAccountFunctions()
    svc = AccountAdminService(InMemoryProfiles(), InMemoryRoles(), functions, InMemorySlots())

    with pytest.raises(ValidationError, match="your own account"):
        svc.delete_user(current=_admin(), user_id="admin-1")

    student = SessionUser(user_id="u1", email="", full_name="", role=Role.STUDENT, access_token="t")
    with pytest.raises(AuthorizationError):
        svc.delete_user(current=student, user_id="u2")

    svc.delete_user(current=_admin(), user_id="u2")
    assert functions.deleted == ["u2"]


def test_list_students_by_role():
    profiles = InMemoryProfiles(
        [Profile("u1", "Ann", "ann@example.com"), Profile("admin-1", "Admin", "a@example.com")]
    )
    roles = InMemoryRoles({"u1": Role.STUDENT, "admin-1": Role.ADMIN})
    svc = AccountAdminService(profiles, roles, FakeAccountFunctions(), InMemorySlots())

    assert [p.user_id for p in svc.list_students()] == ["u1"]
    assert [p.user_id for p in svc.list_admins()] == ["admin-1"]
    assert svc.count_students() == 1


@pytest.mark.parametrize("goal", ["0", "abc", None, -3])
def test_goal_must_be_positive_whole_number(goal):
    svc = ProfileService(InMemoryProfiles([Profile("u1", "Ann", "ann@example.com")]))
    with pytest.raises(ValidationError):
        svc.update_goal("u1", goal)


def test_goal_update_is_stored():
    profiles = InMemoryProfiles([Profile("u1", "Ann", "ann@example.com")])
    assert ProfileService(profiles).update_goal("u1", "12") == 12
    assert profiles.by_id["u1"].attendance_goal == 12


@pytest.mark.parametrize(
    "kwargs",
    [
        {"full_name": 123, "phone": None},
        {"full_name": ["Ann"], "phone": None},
        {"full_name": "Ann", "phone": 5551234},
    ],
)
def test_profile_update_rejects_non_text(kwargs):
    profiles = InMemoryProfiles([Profile("u1", "Ann", "ann@example.com")])
    with pytest.raises(ValidationError, match="must be text"):
        ProfileService(profiles).update_profile("u1", **kwargs)
    assert profiles.updates == []


def test_login_rejects_non_text_password():
    auth = FakeAuthGateway()
    auth.add("ann@example.com", "secret1", "u1")
    with pytest.raises(ValidationError, match="Password must be text"):
        AuthService(auth, InMemoryProfiles(), InMemoryRoles()).login(email="ann@example.com", password=123456)


def test_decode_function_body():
    assert decode_function_body(b'{"user": {"id": "x"}}') == {"user": {"id": "x"}}
    assert decode_function_body("") == {}
    with pytest.raises(PrivilegedFunctionError, match="boom"):
        decode_function_body({"error": "boom"})
    with pytest.raises(PrivilegedFunctionError):
        decode_function_body("<html>")


class FakeConnection:
    def __init__(self, response):
        self.invoked = []
        self._response = response

    def connect(self):
        def invoke(name, invoke_options):
            self.invoked.append((name, invoke_options["body"]))
            return self._response

        return SimpleNamespace(functions=SimpleNamespace(invoke=invoke))


def test_account_functions_require_user_id():
    conn = FakeConnection({"user": {}})
    with pytest.raises(PrivilegedFunctionError, match="User creation failed"):
        SupabaseAccountFunctions(conn).create_account(
            function=CREATE_STUDENT_FUNCTION, email="a@example.com", password="secret1", full_name="A"
        )

    conn = FakeConnection({"user": {"id": "new-id"}})
    assert (
        SupabaseAccountFunctions(conn).create_account(
            function=CREATE_STUDENT_FUNCTION, email="a@example.com", password="secret1", full_name="A"
        )
        == "new-id"
    )
    assert conn.invoked[0][1] == {"email": "a@example.com", "password": "secret1", "full_name": "A"}
