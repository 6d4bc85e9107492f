from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import NotificationCategory


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    title: str
    message: str
    category: NotificationCategory
    is_read: bool
    created_at: datetime
