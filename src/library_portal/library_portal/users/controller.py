from __future__ import annotations

from flask import Flask, session

from ..common.http import json_body, ok
from ..container import Container
from .guards import admin_required, current_user, login_required, student_required
from .model import NewStudent, SessionUser
from .service import profile_to_dict, profiles_to_dicts


def register(app: Flask, container: Container) -> None:
    def _start_session(user: SessionUser):
        session.clear()
        session.update(user.to_session())
        return ok(
            f"Welcome back, {user.full_name}!",
            user={"id": user.user_id, "email": user.email, "name": user.full_name, "role": user.role.value},
            redirect=user.role.landing_page,
        )

    @app.route("/api/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = json_body()
        container.auth_service.sign_up(
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            student_id=data.get("student_id", ""),
            phone=data.get("phone"),
        )
        return ok("Account created! You can now sign in.", 201, redirect="/login")

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.login(email=data.get("email", ""), password=data.get("password", ""))
        return _start_session(user)

    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = json_body()
        user = container.auth_service.admin_login(email=data.get("email", ""), password=data.get("password", ""))
        return _start_session(user)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.auth_service.logout(SessionUser.from_session(session))
        session.clear()
        return ok("Signed out", redirect="/login")

    @app.route("/api/auth/session", methods=["GET"], endpoint="auth_session")
    def auth_session():
        user = SessionUser.from_session(session)
        if user is None:
            return ok(authenticated=False)
        return ok(
            authenticated=True,
            user={"id": user.user_id, "email": user.email, "name": user.full_name, "role": user.role.value},
            redirect=user.role.landing_page,
        )

    @app.route("/api/student/profile", methods=["GET"], endpoint="student_profile")
    @login_required
    def student_profile():
        profile = container.profile_service.get(current_user().user_id)
        return ok(profile=profile_to_dict(profile))

    @app.route("/api/student/profile", methods=["PUT", "POST"], endpoint="student_profile_update")
    @student_required
    def student_profile_update():
        data = json_body()
        profile = container.profile_service.update_profile(
            current_user().user_id, full_name=data.get("full_name", ""), phone=data.get("phone")
        )
        session["name"] = profile.full_name
        return ok("Profile updated!", profile=profile_to_dict(profile))

    @app.route("/api/student/goal", methods=["PUT", "POST"], endpoint="student_goal_update")
    @student_required
    def student_goal_update():
        goal = container.profile_service.update_goal(current_user().user_id, json_body().get("goal"))
        return ok(f"Your monthly attendance goal is now {goal} days.", goal=goal)

    @app.route("/api/admin/students", methods=["GET"], endpoint="admin_students")
    @admin_required
    def admin_students():
        return ok(students=profiles_to_dicts(container.account_admin_service.list_students()))

    @app.route("/api/admin/admins", methods=["GET"], endpoint="admin_admins")
    @admin_required
    def admin_admins():
        return ok(admins=profiles_to_dicts(container.account_admin_service.list_admins()))

    @app.route("/api/admin/students", methods=["POST"], endpoint="admin_add_student")
    @admin_required
    def admin_add_student():
        data = json_body()
        student = NewStudent(
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            student_id=data.get("student_id", ""),
            seat_number=data.get("seat_number"),
            phone=data.get("phone"),
        )
        user_id = container.account_admin_service.create_student(student, time_slots=data.get("time_slots"))
        return ok("New student has been successfully registered.", 201, user_id=user_id)

    @app.route("/api/admin/admins", methods=["POST"], endpoint="admin_add_admin")
    @admin_required
    def admin_add_admin():
        data = json_body()
        user_id = container.account_admin_service.create_admin(
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
        )
        return ok("New admin has been successfully created.", 201, user_id=user_id)

    @app.route("/api/admin/users/<user_id>", methods=["DELETE"], endpoint="admin_delete_user")
    @admin_required
    def admin_delete_user(user_id: str):
        container.account_admin_service.delete_user(current=current_user(), user_id=user_id)
        return ok("User has been successfully removed.")
