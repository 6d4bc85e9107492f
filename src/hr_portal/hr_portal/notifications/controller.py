from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_datetime
from ..common.http import current_principal, json_ok
from ..container import Container
from .model import Notification


def serialize_notification(n: Notification) -> dict:
    return {
        "id": n.notification_id,
        "title": n.title,
        "message": n.message,
        "type": n.category.value,
        "isRead": n.is_read,
        "createdAt": format_datetime(n.created_at),
    }


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/notifications", methods=["GET"], endpoint="list_notifications")
    def list_notifications():
        principal = current_principal()
        unread_only = request.args.get("unread", "0").lower() in {"1", "true", "yes"}
        items = service.list_for(principal, unread_only=unread_only)
        return json_ok([serialize_notification(n) for n in items])

    @app.route("/notifications/<int:notification_id>/read", methods=["PATCH"], endpoint="read_notification")
    def read_notification(notification_id: int):
        service.mark_read(current_principal(), notification_id)
        return json_ok()
