from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, List, Optional, Protocol, Sequence

import requests

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.constants import DATE_FORMAT, DEFAULT_ZENHR_API_URL
from ..core.exceptions import ConnectorError
from .model import AttendancePayload, EmployeeRecord, RequestPayload

logger = logging.getLogger(__name__)


class HRConnector(Protocol):
    """Boundary to the external HR provider.

    Every method either returns the provider's answer or raises
    ``ConnectorError``; callers never see partial success.
    """

    def fetch_employee(self, employee_id: str) -> EmployeeRecord:
        raise NotImplementedError

    def fetch_all_employees(self, company_id: Optional[str] = None) -> Sequence[EmployeeRecord]:
        raise NotImplementedError

    def mark_attendance(self, record: AttendancePayload) -> dict:
        raise NotImplementedError

    def fetch_attendance_records(self, employee_id: str, start: str, end: str) -> Sequence[AttendancePayload]:
        raise NotImplementedError

    def submit_request(self, record: RequestPayload) -> dict:
        raise NotImplementedError

    def fetch_requests(self, employee_id: Optional[str] = None) -> Sequence[RequestPayload]:
        raise NotImplementedError

    def update_request_status(self, request_id: str, status: str, comment: Optional[str] = None) -> dict:
        raise NotImplementedError


def _items(payload: Any) -> List[dict]:
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    return [item for item in (payload or []) if isinstance(item, dict)]


class ZenHRConnector(HRConnector):
    """ZenHR REST client.

    Without an API key no network call is made: each operation answers with a
    placeholder built locally from the input and the injected clock, so the
    portal can run in development and tests without a live backend.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_ZENHR_API_URL,
        api_key: str = "",
        session: Optional[requests.Session] = None,
        clock: Callable[[], datetime] = now_local,
        timeout: float = 15,
    ):
        self._base_url = (base_url or DEFAULT_ZENHR_API_URL).rstrip("/")
        self._api_key = api_key or ""
        self._session = session or requests.Session()
        self._clock = clock
        self._timeout = timeout

    @property
    def offline(self) -> bool:
        return not self._api_key

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _call(
        self,
        method: str,
        endpoint: str,
        *,
        operation: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        url = f"{self._base_url}{endpoint}"
        try:
            resp = self._session.request(
                method,
                url,
                json=body,
                params=params,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("ZenHR %s failed: %s", operation, exc)
            raise ConnectorError(f"Unable to {operation} in ZenHR", operation=operation) from exc

        if not resp.ok:
            logger.error("ZenHR %s returned %s %s", operation, resp.status_code, resp.reason)
            raise ConnectorError(
                f"ZenHR API error: {resp.status_code} {resp.reason}",
                operation=operation,
                status_code=resp.status_code,
            )

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("ZenHR %s returned a non-JSON body", operation)
            raise ConnectorError(f"Unable to {operation} in ZenHR", operation=operation) from exc

    def _stamp(self) -> tuple[int, str]:
        now = self._clock()
        return int(now.timestamp() * 1000), now.isoformat()

    # -------- Employees --------
    def fetch_employee(self, employee_id: str) -> EmployeeRecord:
        if self.offline:
            logger.debug("ZenHR offline: placeholder employee %s", employee_id)
            return EmployeeRecord(
                id=str(employee_id),
                name=f"Employee {employee_id}",
                email=f"employee{employee_id}@company.com",
                department="Engineering",
                position="Software Developer",
                hire_date="2023-01-15",
                status="active",
            )
        data = self._call("GET", f"/employees/{employee_id}", operation="fetch employee data")
        return EmployeeRecord.from_dict(data)

    def fetch_all_employees(self, company_id: Optional[str] = None) -> Sequence[EmployeeRecord]:
        if self.offline:
            logger.debug("ZenHR offline: placeholder employee list")
            return [
                EmployeeRecord(
                    id="1",
                    name="John Doe",
                    email="john.doe@company.com",
                    department="Engineering",
                    position="Senior Developer",
                    hire_date="2022-03-15",
                    status="active",
                ),
                EmployeeRecord(
                    id="2",
                    name="Jane Smith",
                    email="jane.smith@company.com",
                    department="HR",
                    position="HR Manager",
                    hire_date="2021-08-20",
                    status="active",
                ),
            ]
        endpoint = f"/companies/{company_id}/employees" if company_id else "/employees"
        data = self._call("GET", endpoint, operation="fetch employees")
        return [EmployeeRecord.from_dict(item) for item in _items(data)]

    # -------- Attendance --------
    def mark_attendance(self, record: AttendancePayload) -> dict:
        if self.offline:
            ms, iso = self._stamp()
            return {
                "success": True,
                "message": "Attendance marked successfully",
                "data": {**record.to_dict(), "id": f"att_{ms}", "timestamp": iso},
            }
        return self._call("POST", "/attendance", operation="mark attendance", body=record.to_dict())

    def fetch_attendance_records(self, employee_id: str, start: str, end: str) -> Sequence[AttendancePayload]:
        if self.offline:
            first, last = parse_iso_date(start), parse_iso_date(end)
            out: list[AttendancePayload] = []
            day = first
            while day <= last:
                out.append(
                    AttendancePayload(
                        employee_id=str(employee_id),
                        date=day.strftime(DATE_FORMAT),
                        check_in="09:00:00",
                        check_out="17:00:00",
                        status="present",
                    )
                )
                day += timedelta(days=1)
            return out
        data = self._call(
            "GET",
            f"/attendance/{employee_id}",
            operation="fetch attendance records",
            params={"start": start, "end": end},
        )
        return [AttendancePayload.from_dict(item) for item in _items(data)]

    # -------- HR requests --------
    def submit_request(self, record: RequestPayload) -> dict:
        if self.offline:
            ms, iso = self._stamp()
            return {
                "success": True,
                "message": "HR request submitted successfully",
                "data": {**record.to_dict(), "id": f"req_{ms}", "status": "pending", "createdAt": iso},
            }
        return self._call("POST", "/hr-requests", operation="submit HR request", body=record.to_dict())

    def fetch_requests(self, employee_id: Optional[str] = None) -> Sequence[RequestPayload]:
        if self.offline:
            owner = str(employee_id) if employee_id else "1"
            return [
                RequestPayload(
                    id="req_1",
                    employee_id=owner,
                    type="leave",
                    title="Annual Leave Request",
                    description="Requesting 5 days annual leave",
                    start_date="2024-02-15",
                    end_date="2024-02-19",
                    status="pending",
                ),
                RequestPayload(
                    id="req_2",
                    employee_id=owner,
                    type="document_request",
                    title="Salary Certificate",
                    description="Need salary certificate for bank loan",
                    status="approved",
                ),
            ]
        params = {"employee": employee_id} if employee_id else None
        data = self._call("GET", "/hr-requests", operation="fetch HR requests", params=params)
        return [RequestPayload.from_dict(item) for item in _items(data)]

    def update_request_status(self, request_id: str, status: str, comment: Optional[str] = None) -> dict:
        if self.offline:
            _, iso = self._stamp()
            return {
                "success": True,
                "message": "HR request status updated successfully",
                "data": {"id": str(request_id), "status": status, "updatedAt": iso},
            }
        return self._call(
            "PATCH",
            f"/hr-requests/{request_id}",
            operation="update HR request status",
            body={"status": status, "comments": comment},
        )
