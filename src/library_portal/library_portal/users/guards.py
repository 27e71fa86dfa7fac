from __future__ import annotations

from functools import wraps

from flask import current_app, g, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import SessionUser


def load_session_user() -> SessionUser:
    user = SessionUser.from_session(session)
    if user is None:
        raise AuthenticationError("Please sign in to continue")

    container = current_app.extensions.get("library_portal")
    if container is not None:
        renewed = container.auth_service.renew(user)
        if renewed is not user:
            session.update(renewed.to_session())
            user = renewed

    g.current_user = user
    g.access_token = user.access_token
    return user


def current_user() -> SessionUser:
    user = g.get("current_user")
    return user if user is not None else load_session_user()


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        load_session_user()
        return view(*args, **kwargs)

    return wrapper


def _role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = load_session_user()
            if user.role != role:
                # Wrong role lands on the user's own home screen.
                raise AuthorizationError(redirect_to=user.role.landing_page)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = _role_required(Role.ADMIN)
student_required = _role_required(Role.STUDENT)
