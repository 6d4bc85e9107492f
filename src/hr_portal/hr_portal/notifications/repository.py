from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationCategory
from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, user_id: int, title: str, message: str, category: NotificationCategory) -> int:
        raise NotImplementedError

    def get(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = 200) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        raise NotImplementedError
