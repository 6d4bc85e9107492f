from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


def _compact(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class EmployeeRecord:
    """Employee as the external HR provider describes it."""

    id: str
    name: str
    email: str
    department: str = ""
    position: str = ""
    hire_date: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmployeeRecord":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            email=data.get("email") or "",
            department=data.get("department") or "",
            position=data.get("position") or "",
            hire_date=data.get("hireDate") or "",
            status=data.get("status") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "position": self.position,
            "hireDate": self.hire_date,
            "status": self.status,
        }


@dataclass(frozen=True)
class AttendancePayload:
    employee_id: str
    date: str
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    status: str = "present"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendancePayload":
        return cls(
            employee_id=str(data.get("employeeId", "")),
            date=data.get("date") or "",
            check_in=data.get("checkIn"),
            check_out=data.get("checkOut"),
            status=data.get("status") or "present",
        )

    def to_dict(self) -> dict:
        return _compact(
            {
                "employeeId": self.employee_id,
                "date": self.date,
                "checkIn": self.check_in,
                "checkOut": self.check_out,
                "status": self.status,
            }
        )


@dataclass(frozen=True)
class RequestPayload:
    employee_id: str
    type: str
    title: str
    description: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequestPayload":
        return cls(
            id=data.get("id"),
            employee_id=str(data.get("employeeId", "")),
            type=data.get("type") or "",
            title=data.get("title") or "",
            description=data.get("description") or "",
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            status=data.get("status"),
        )

    def to_dict(self) -> dict:
        return _compact(
            {
                "id": self.id,
                "employeeId": self.employee_id,
                "type": self.type,
                "title": self.title,
                "description": self.description,
                "startDate": self.start_date,
                "endDate": self.end_date,
                "status": self.status,
            }
        )
