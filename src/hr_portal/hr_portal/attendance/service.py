from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import format_date, now_local, parse_clock_time, parse_optional_date
from ..common.validators import optional_int, optional_text, require_enum
from ..core.constants import MAX_LOCATION_LENGTH
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ConflictError, ValidationError
from ..users.model import Principal
from ..zenhr.connector import HRConnector
from ..zenhr.model import AttendancePayload
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    connector_response: dict


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        connector: HRConnector,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._connector = connector
        self._clock = clock

    def mark(
        self,
        principal: Principal,
        *,
        date: Optional[str],
        check_in: Optional[str] = None,
        check_out: Optional[str] = None,
        status: Optional[str] = None,
        notes: Optional[str] = None,
        location: Optional[str] = None,
    ) -> MarkResult:
        work_date = parse_optional_date(date, "Date")
        if work_date is None:
            raise ValidationError("Date is required")

        in_time = parse_clock_time(check_in, "Check-in")
        out_time = parse_clock_time(check_out, "Check-out")
        att_status = require_enum(status, AttendanceStatus, "Status", default=AttendanceStatus.PRESENT)
        notes_text = optional_text(notes, "Notes")
        location_text = optional_text(location, "Location", max_length=MAX_LOCATION_LENGTH)

        check_in_at = datetime.combine(work_date, in_time) if in_time else self._clock()
        check_out_at = datetime.combine(work_date, out_time) if out_time else None
        if in_time and out_time and check_out_at < check_in_at:
            raise ValidationError("Check-out cannot be earlier than check-in")

        # Fail before telling the provider; the unique key still guards races.
        if self._attendance.get_for_employee_and_date(principal.user_id, work_date):
            raise ConflictError("Attendance already marked for this date")

        ack = self._connector.mark_attendance(
            AttendancePayload(
                employee_id=principal.employee_code or str(principal.user_id),
                date=format_date(work_date) or "",
                check_in=in_time.strftime("%H:%M:%S") if in_time else None,
                check_out=out_time.strftime("%H:%M:%S") if out_time else None,
                status=att_status.value.lower(),
            )
        )

        attendance_id = self._attendance.create(
            employee_id=principal.user_id,
            work_date=work_date,
            check_in=check_in_at,
            check_out=check_out_at,
            status=att_status,
            notes=notes_text,
            location=location_text,
        )
        record = self._attendance.get(attendance_id)
        if record is None:
            raise ValidationError("Attendance could not be saved")

        logger.info("Attendance %s marked for user %s on %s", attendance_id, principal.user_id, work_date)
        return MarkResult(record=record, connector_response=ack)

    def list_records(
        self,
        principal: Principal,
        *,
        employee_id: object = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        target = principal.user_id
        requested = optional_int(employee_id, "employeeId")
        if requested is not None and principal.role in {Role.MANAGER, Role.ADMIN}:
            target = requested

        return self._attendance.find(
            employee_id=target,
            start_date=parse_optional_date(start_date, "Start date"),
            end_date=parse_optional_date(end_date, "End date"),
        )
