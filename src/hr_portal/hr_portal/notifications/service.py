from __future__ import annotations

from typing import Sequence

from ..core.exceptions import NotFoundError
from ..users.model import Principal
from .model import Notification
from .repository import NotificationRepository


class NotificationService:
    """Read side of the notifications the workflows create."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def list_for(self, principal: Principal, *, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_for_user(principal.user_id, unread_only=unread_only)

    def mark_read(self, principal: Principal, notification_id: int) -> None:
        item = self._notifications.get(int(notification_id))
        # Someone else's notification is reported exactly like a missing one.
        if not item or item.user_id != principal.user_id:
            raise NotFoundError("Notification not found")
        if not item.is_read:
            self._notifications.mark_read(item.notification_id)
