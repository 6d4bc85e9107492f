from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection, TransactionScope
from .hr_requests.mysql_request_repository import MySQLRequestRepository
from .hr_requests.repository import RequestRepository
from .hr_requests.service import RequestWorkflowService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .zenhr.connector import HRConnector, ZenHRConnector


@dataclass(frozen=True)
class Container:
    tx: TransactionScope
    connector: HRConnector

    users_repo: UserRepository
    requests_repo: RequestRepository
    attendance_repo: AttendanceRepository
    notifications_repo: NotificationRepository

    auth_service: AuthService
    request_service: RequestWorkflowService
    attendance_service: AttendanceService
    notification_service: NotificationService


def wire(
    *,
    tx: TransactionScope,
    connector: HRConnector,
    users_repo: UserRepository,
    requests_repo: RequestRepository,
    attendance_repo: AttendanceRepository,
    notifications_repo: NotificationRepository,
) -> Container:
    """Build services over the given repositories and connector."""
    return Container(
        tx=tx,
        connector=connector,
        users_repo=users_repo,
        requests_repo=requests_repo,
        attendance_repo=attendance_repo,
        notifications_repo=notifications_repo,
        auth_service=AuthService(users_repo),
        request_service=RequestWorkflowService(requests_repo, users_repo, notifications_repo, connector, tx),
        attendance_service=AttendanceService(attendance_repo, connector),
        notification_service=NotificationService(notifications_repo),
    )


def build_container(*, db_config: dict, zenhr_config: dict) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    connector = ZenHRConnector(
        base_url=str(zenhr_config.get("base_url") or ""),
        api_key=str(zenhr_config.get("api_key") or ""),
        timeout=float(zenhr_config.get("timeout", 15)),
    )

    return wire(
        tx=conn,
        connector=connector,
        users_repo=MySQLUserRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
    )
