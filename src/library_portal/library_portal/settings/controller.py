from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container
from ..users.guards import admin_required


def register(app: Flask, container: Container) -> None:
    store = container.settings_store

    @app.route("/api/admin/settings", methods=["GET"], endpoint="admin_settings")
    @admin_required
    def admin_settings():
        return ok(settings=store.load().to_dict())

    @app.route("/api/admin/settings", methods=["PUT", "POST"], endpoint="admin_settings_save")
    @admin_required
    def admin_settings_save():
        prefs = store.save(json_body())
        return ok("Library settings have been saved successfully.", settings=prefs.to_dict())
