from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from types import SimpleNamespace
from typing import Any, Optional

import pytest
from werkzeug.security import generate_password_hash

from src.hr_portal.hr_portal.attendance.model import AttendanceRecord
from src.hr_portal.hr_portal.container import wire
from src.hr_portal.hr_portal.core.enums import AttendanceStatus, NotificationCategory, Role
from src.hr_portal.hr_portal.core.exceptions import ConflictError, ConnectorError
from src.hr_portal.hr_portal.hr_requests.model import HRRequest, RequestApproval, RequestQuery
from src.hr_portal.hr_portal.notifications.model import Notification
from src.hr_portal.hr_portal.users.model import User
from src.hr_portal.hr_portal.zenhr.connector import ZenHRConnector

FIXED_NOW = datetime(2025, 3, 10, 8, 45, 0)


class Ticker:
    """Deterministic clock: every read moves one second forward."""

    def __init__(self, start: datetime = FIXED_NOW):
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self.users_by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.email == email), None)

    def find_first_manager(self, company_id: int) -> Optional[User]:
        managers = [
            u
            for u in self.users_by_id.values()
            if u.company_id == company_id and u.role == Role.MANAGER and u.is_active
        ]
        return min(managers, key=lambda u: u.user_id, default=None)


class InMemoryRequests:
    def __init__(self, users: InMemoryUsers, clock: Ticker):
        self._users = users
        self._clock = clock
        self.rows: dict[int, HRRequest] = {}
        self.approvals: list[RequestApproval] = []
        self._id = 0

    def create(self, *, type, title, description, priority, start_date, end_date, documents, employee_id, manager_id, company_id):
        self._id += 1
        now = self._clock()
        self.rows[self._id] = HRRequest(
            request_id=self._id,
            type=type,
            title=title,
            description=description,
            status="PENDING",
            priority=priority,
            start_date=start_date,
            end_date=end_date,
            documents=documents,
            comments=None,
            employee_id=employee_id,
            manager_id=manager_id,
            company_id=company_id,
            created_at=now,
            updated_at=now,
        )
        return self._id

    def get(self, request_id: int) -> Optional[HRRequest]:
        row = self.rows.get(int(request_id))
        return self._joined(row) if row else None

    def find(self, query: RequestQuery):
        out = []
        for row in self.rows.values():
            if query.employee_id is not None and row.employee_id != query.employee_id:
                continue
            if query.involving_user_id is not None and query.involving_user_id not in {row.employee_id, row.manager_id}:
                continue
            if query.company_id is not None and row.company_id != query.company_id:
                continue
            if query.status and row.status != query.status:
                continue
            if query.type and row.type != query.type:
                continue
            out.append(self._joined(row))
        out.sort(key=lambda r: (r.created_at, r.request_id), reverse=True)
        return out[: query.limit]

    def update_status(self, *, request_id, status, comments):
        row = self.rows.get(int(request_id))
        if not row:
            return False
        self.rows[row.request_id] = replace(row, status=status, comments=comments, updated_at=self._clock())
        return True

    def add_approval(self, *, request_id, approver_id, status, comments):
        approver = self._users.get_by_id(approver_id)
        approval = RequestApproval(
            approval_id=len(self.approvals) + 1,
            request_id=int(request_id),
            approver_id=int(approver_id),
            status=status,
            comments=comments,
            created_at=self._clock(),
            approver_name=approver.name if approver else None,
            approver_email=approver.email if approver else None,
        )
        self.approvals.append(approval)
        return approval.approval_id

    def _joined(self, row: HRRequest) -> HRRequest:
        employee = self._users.get_by_id(row.employee_id)
        manager = self._users.get_by_id(row.manager_id) if row.manager_id else None
        return replace(
            row,
            employee_name=employee.name if employee else None,
            employee_email=employee.email if employee else None,
            employee_code=employee.employee_code if employee else None,
            employee_department=employee.department if employee else None,
            manager_name=manager.name if manager else None,
            manager_email=manager.email if manager else None,
            approvals=tuple(a for a in self.approvals if a.request_id == row.request_id),
        )


class InMemoryNotifications:
    def __init__(self, clock: Ticker):
        self._clock = clock
        self.items: dict[int, Notification] = {}

    def create(self, *, user_id, title, message, category: NotificationCategory):
        nid = len(self.items) + 1
        self.items[nid] = Notification(
            notification_id=nid,
            user_id=int(user_id),
            title=title,
            message=message,
            category=category,
            is_read=False,
            created_at=self._clock(),
        )
        return nid

    def get(self, notification_id: int) -> Optional[Notification]:
        return self.items.get(int(notification_id))

    def list_for_user(self, user_id, *, unread_only=False, limit=200):
        items = [n for n in self.items.values() if n.user_id == user_id and not (unread_only and n.is_read)]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items[:limit]

    def mark_read(self, notification_id: int) -> bool:
        item = self.items.get(int(notification_id))
        if not item:
            return False
        self.items[item.notification_id] = replace(item, is_read=True)
        return True

    def for_user(self, user_id: int) -> list[Notification]:
        return [n for n in self.items.values() if n.user_id == user_id]


class InMemoryAttendance:
    def __init__(self, clock: Ticker):
        self._clock = clock
        self.records: dict[int, AttendanceRecord] = {}

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.records.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def create(self, *, employee_id, work_date, check_in, check_out, status: AttendanceStatus, notes=None, location=None):
        if self.get_for_employee_and_date(employee_id, work_date):
            raise ConflictError("Attendance already marked for this date")
        aid = len(self.records) + 1
        self.records[aid] = AttendanceRecord(
            attendance_id=aid,
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            status=status,
            notes=notes,
            location=location,
            created_at=self._clock(),
        )
        return aid

    def find(self, *, employee_id, start_date=None, end_date=None, limit=500):
        items = [
            r
            for r in self.records.values()
            if r.employee_id == employee_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]


class SnapshotTransaction:
    """Unit of work over in-memory repositories: restores their state on error."""

    def __init__(self, *stores: Any):
        self._stores = stores
        self.committed = 0
        self.rolled_back = 0

    @contextmanager
    def transaction(self):
        saved = [copy.deepcopy({k: v for k, v in s.__dict__.items() if not k.startswith("_")}) for s in self._stores]
        try:
            yield
        except Exception:
            for store, state in zip(self._stores, saved):
                store.__dict__.update(state)
            self.rolled_back += 1
            raise
        self.committed += 1


class RecordingConnector(ZenHRConnector):
    """Offline ZenHR connector that records calls and can be told to fail."""

    def __init__(self, clock: Ticker):
        super().__init__(api_key="", clock=clock)
        self.calls: list[tuple[str, tuple]] = []
        self.failing: set[str] = set()

    def _record(self, name: str, *args):
        self.calls.append((name, args))
        if name in self.failing:
            raise ConnectorError("ZenHR API error: 503 Service Unavailable", operation=name, status_code=503)

    def mark_attendance(self, record):
        self._record("mark_attendance", record)
        return super().mark_attendance(record)

    def submit_request(self, record):
        self._record("submit_request", record)
        return super().submit_request(record)

    def update_request_status(self, request_id, status, comment=None):
        self._record("update_request_status", request_id, status, comment)
        return super().update_request_status(request_id, status, comment)

    def fetch_all_employees(self, company_id=None):
        self._record("fetch_all_employees", company_id)
        return super().fetch_all_employees(company_id)

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


# Cheap hash so tests stay fast.
def _hash(password: str) -> str:
    return generate_password_hash(password, method="pbkdf2:sha256:1000")


@dataclass(frozen=True)
class Seed:
    admin: User
    manager: User
    employee: User
    coworker: User
    other_manager: User
    other_employee: User


def _seed_users() -> Seed:
    return Seed(
        admin=User(1, "Ada Admin", "admin@acme.test", _hash("admin123"), Role.ADMIN, "ADM-1", 1, "Management", "Admin"),
        manager=User(2, "Mona Manager", "manager@acme.test", _hash("manager123"), Role.MANAGER, "MGR-1", 1, "HR", "HR Manager"),
        employee=User(3, "Eli Employee", "eli@acme.test", _hash("employee123"), Role.EMPLOYEE, "EMP-3", 1, "Engineering", "Developer"),
        coworker=User(4, "Cora Coworker", "cora@acme.test", _hash("employee123"), Role.EMPLOYEE, "EMP-4", 1, "Engineering", "QA"),
        other_manager=User(10, "Omar Other", "omar@globex.test", _hash("manager123"), Role.MANAGER, "G-MGR", 2, "HR", "Lead"),
        other_employee=User(11, "Gus Globex", "gus@globex.test", _hash("employee123"), Role.EMPLOYEE, "G-EMP", 2, "Sales", "Rep"),
    )


@pytest.fixture
def seed() -> Seed:
    return _seed_users()


@pytest.fixture
def world(seed: Seed):
    clock = Ticker()
    users = InMemoryUsers(list(seed.__dict__.values()))
    requests_repo = InMemoryRequests(users, clock)
    notifications = InMemoryNotifications(clock)
    attendance = InMemoryAttendance(clock)
    tx = SnapshotTransaction(requests_repo, notifications, attendance)
    connector = RecordingConnector(clock)

    container = wire(
        tx=tx,
        connector=connector,
        users_repo=users,
        requests_repo=requests_repo,
        attendance_repo=attendance,
        notifications_repo=notifications,
    )
    return SimpleNamespace(
        clock=clock,
        users=users,
        requests=requests_repo,
        notifications=notifications,
        attendance=attendance,
        tx=tx,
        connector=connector,
        container=container,
        seed=seed,
    )
