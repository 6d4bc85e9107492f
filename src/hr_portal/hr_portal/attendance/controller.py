from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_date, format_datetime
from ..common.http import current_principal, json_body, json_ok
from ..container import Container
from .model import AttendanceRecord


def serialize_attendance(a: AttendanceRecord) -> dict:
    return {
        "id": a.attendance_id,
        "employeeId": a.employee_id,
        "date": format_date(a.work_date),
        "checkIn": format_datetime(a.check_in),
        "checkOut": format_datetime(a.check_out),
        "status": a.status.value,
        "notes": a.notes,
        "location": a.location,
        "createdAt": format_datetime(a.created_at),
        "employee": {"name": a.employee_name, "email": a.employee_email, "employeeId": a.employee_code},
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        principal = current_principal()
        body = json_body()
        result = service.mark(
            principal,
            date=body.get("date"),
            check_in=body.get("checkIn"),
            check_out=body.get("checkOut"),
            status=body.get("status"),
            notes=body.get("notes"),
            location=body.get("location"),
        )
        return json_ok(
            {"attendance": serialize_attendance(result.record), "zenhrResponse": result.connector_response},
            message="Attendance marked successfully",
        )

    @app.route("/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        principal = current_principal()
        items = service.list_records(
            principal,
            employee_id=request.args.get("employeeId"),
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
        )
        return json_ok([serialize_attendance(a) for a in items])
