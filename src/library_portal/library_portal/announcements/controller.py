from __future__ import annotations

from flask import Flask

from ..common.http import ok
from ..container import Container
from ..core.constants import DEFAULT_ANNOUNCEMENT_LIMIT
from ..users.guards import login_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/announcements", methods=["GET"], endpoint="announcements")
    @login_required
    def announcements():
        items = container.announcements_repo.list_recent(DEFAULT_ANNOUNCEMENT_LIMIT)
        return ok(
            announcements=[
                {
                    "id": a.announcement_id,
                    "title": a.title,
                    "content": a.content,
                    "priority": a.priority.value,
                    "created_at": a.created_at.isoformat() if a.created_at else None,
                }
                for a in items
            ]
        )
