from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark per employee per day."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    employee_code: Optional[str] = None
