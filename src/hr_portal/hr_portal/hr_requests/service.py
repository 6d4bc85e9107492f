from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from ..common.datetime_utils import format_date, parse_optional_date
from ..common.validators import optional_int, optional_text, require_enum, require_non_empty, require_present
from ..core.constants import (
    MAX_STATUS_LENGTH,
    MAX_TITLE_LENGTH,
    MAX_TYPE_LENGTH,
    NEW_REQUEST_TITLE,
    REQUEST_UPDATE_TITLE,
)
from ..core.enums import NotificationCategory, Priority, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..database.connection import TransactionScope
from ..notifications.repository import NotificationRepository
from ..users.model import Principal
from ..users.repository import UserRepository
from ..zenhr.connector import HRConnector
from ..zenhr.model import RequestPayload
from .model import HRRequest, RequestQuery
from .repository import RequestRepository

logger = logging.getLogger(__name__)

APPROVER_ROLES = {Role.MANAGER, Role.ADMIN}


@dataclass(frozen=True)
class RequestInput:
    """Raw submission as it arrives from the caller (strings, not yet validated)."""

    type: Optional[str]
    title: Optional[str]
    description: Optional[str]
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    priority: Optional[str] = None
    documents: Any = None


@dataclass(frozen=True)
class SubmitResult:
    request: HRRequest
    connector_response: dict


class RequestWorkflowService:
    """HR request lifecycle: submit, list, update status.

    A request is created PENDING and moved by a manager or admin to any
    status text in one step. The manager is picked once at submission and
    never reassigned here.
    """

    def __init__(
        self,
        requests: RequestRepository,
        users: UserRepository,
        notifications: NotificationRepository,
        connector: HRConnector,
        tx: TransactionScope,
    ):
        self._requests = requests
        self._users = users
        self._notifications = notifications
        self._connector = connector
        self._tx = tx

    def submit(self, principal: Principal, data: RequestInput) -> SubmitResult:
        req_type = require_non_empty(data.type, "Type", max_length=MAX_TYPE_LENGTH)
        title = require_non_empty(data.title, "Title", max_length=MAX_TITLE_LENGTH)
        description = require_non_empty(data.description, "Description")
        priority = require_enum(data.priority, Priority, "Priority", default=Priority.MEDIUM)
        start_date = parse_optional_date(data.start_date, "Start date")
        end_date = parse_optional_date(data.end_date, "End date")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        # Tenant comes from the stored requester, never from the caller.
        requester = self._users.get_by_id(principal.user_id)
        if not requester or not requester.is_active:
            raise NotFoundError("Employee not found")
        if requester.company_id is None:
            raise ValidationError("Employee is not assigned to a company")

        # A connector failure propagates here, before anything is written.
        ack = self._connector.submit_request(
            RequestPayload(
                employee_id=requester.employee_code or str(requester.user_id),
                type=req_type,
                title=title,
                description=description,
                start_date=format_date(start_date),
                end_date=format_date(end_date),
            )
        )

        # First match only: no reporting line, no load balancing.
        manager = self._users.find_first_manager(requester.company_id)

        with self._tx.transaction():
            request_id = self._requests.create(
                type=req_type.upper(),
                title=title,
                description=description,
                priority=priority,
                start_date=start_date,
                end_date=end_date,
                documents=data.documents,
                employee_id=requester.user_id,
                manager_id=manager.user_id if manager else None,
                company_id=requester.company_id,
            )
            if manager:
                self._notifications.create(
                    user_id=manager.user_id,
                    title=NEW_REQUEST_TITLE,
                    message=f"{requester.name} has submitted a {req_type} request: {title}",
                    category=NotificationCategory.HR_REQUEST,
                )

        created = self._requests.get(request_id)
        if created is None:
            raise NotFoundError("HR request not found")

        logger.info(
            "HR request %s submitted by user %s (company %s, manager %s)",
            request_id,
            requester.user_id,
            requester.company_id,
            manager.user_id if manager else None,
        )
        return SubmitResult(request=created, connector_response=ack)

    def list_requests(
        self,
        principal: Principal,
        *,
        status: Optional[str] = None,
        type: Optional[str] = None,
        employee_id: object = None,
    ) -> Sequence[HRRequest]:
        target = optional_int(employee_id, "employeeId")

        if principal.role == Role.EMPLOYEE:
            query = RequestQuery(employee_id=principal.user_id)
        elif principal.role == Role.MANAGER:
            if target is not None:
                # Flat managerial visibility: any employee's requests, regardless of
                # assignment or tenant. Kept as found; see DESIGN.md.
                query = RequestQuery(employee_id=target)
            else:
                query = RequestQuery(involving_user_id=principal.user_id)
        else:
            if principal.company_id is None:
                return []
            query = RequestQuery(company_id=principal.company_id, employee_id=target)

        query = replace(
            query,
            status=(optional_text(status, "Status") or "").upper() or None,
            type=(optional_text(type, "Type") or "").upper() or None,
        )
        return self._requests.find(query)

    def get(self, principal: Principal, request_id: object) -> HRRequest:
        rid = optional_int(require_present(request_id, "Request ID"), "Request ID")
        req = self._requests.get(rid)
        if not req or not self._can_view(principal, req):
            raise NotFoundError("HR request not found")
        return req

    def update_status(
        self,
        principal: Principal,
        *,
        request_id: object,
        status: Optional[str],
        comments: Optional[str] = None,
    ) -> HRRequest:
        if principal.role not in APPROVER_ROLES:
            raise AuthorizationError("Only managers and admins can update HR requests")

        rid = optional_int(require_present(request_id, "Request ID"), "Request ID")
        raw_status = require_non_empty(status, "Status", max_length=MAX_STATUS_LENGTH)
        new_status = raw_status.upper()
        comments = optional_text(comments, "Comments")

        current = self._requests.get(rid)
        if not current or current.company_id != principal.company_id:
            raise NotFoundError("HR request not found")

        # Local writes and the upstream sync succeed or fail together.
        with self._tx.transaction():
            if not self._requests.update_status(request_id=rid, status=new_status, comments=comments):
                raise NotFoundError("HR request not found")
            self._requests.add_approval(
                request_id=rid,
                approver_id=principal.user_id,
                status=new_status,
                comments=comments,
            )
            self._connector.update_request_status(str(rid), raw_status, comments)
            self._notifications.create(
                user_id=current.employee_id,
                title=REQUEST_UPDATE_TITLE,
                message=f"Your {current.type} request has been {new_status.lower()}",
                category=NotificationCategory.HR_REQUEST,
            )

        updated = self._requests.get(rid)
        if updated is None:
            raise NotFoundError("HR request not found")

        logger.info(
            "HR request %s moved %s -> %s by user %s",
            rid,
            current.status,
            new_status,
            principal.user_id,
        )
        return updated

    @staticmethod
    def _can_view(principal: Principal, req: HRRequest) -> bool:
        if principal.role == Role.EMPLOYEE:
            return req.employee_id == principal.user_id
        if principal.role == Role.MANAGER:
            return principal.user_id in {req.employee_id, req.manager_id} or req.company_id == principal.company_id
        return req.company_id == principal.company_id
