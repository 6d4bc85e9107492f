from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Principal role used for authorization."""

    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class RequestStatus(str, Enum):
    """Known states of an HR request.

    Callers may store any status text; ``parse`` maps text outside the known
    set to ``UNRECOGNIZED`` instead of failing.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    UNRECOGNIZED = "UNRECOGNIZED"

    @classmethod
    def parse(cls, value: str | None) -> "RequestStatus":
        text = (value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            return cls.UNRECOGNIZED


class RequestType(str, Enum):
    """Known HR request categories, ``OTHER`` for anything else."""

    LEAVE = "LEAVE"
    EXIT_REENTRY = "EXIT_REENTRY"
    SPONSORSHIP_TRANSFER = "SPONSORSHIP_TRANSFER"
    DOCUMENT_REQUEST = "DOCUMENT_REQUEST"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | None) -> "RequestType":
        text = (value or "").strip().upper().replace("-", "_")
        try:
            return cls(text)
        except ValueError:
            return cls.OTHER


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AttendanceStatus(str, Enum):
    """Attendance status stored locally (uppercase) and sent upstream (lowercase)."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    HALF_DAY = "HALF_DAY"


class NotificationCategory(str, Enum):
    HR_REQUEST = "HR_REQUEST"
    ATTENDANCE = "ATTENDANCE"
    SYSTEM = "SYSTEM"
