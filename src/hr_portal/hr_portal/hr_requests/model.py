from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Tuple

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Priority, RequestStatus, RequestType


@dataclass(frozen=True)
class RequestApproval:
    """Append-only audit entry written on every status change."""

    approval_id: int
    request_id: int
    approver_id: int
    status: str
    comments: Optional[str]
    created_at: datetime
    approver_name: Optional[str] = None
    approver_email: Optional[str] = None


@dataclass(frozen=True)
class HRRequest:
    """Domain entity: an HR request plus the display fields joined from users.

    ``status`` and ``type`` keep the stored uppercase text; ``status_kind``
    and ``type_kind`` give the closed enumeration view of it.
    """

    request_id: int
    type: str
    title: str
    description: str
    status: str
    priority: Priority
    start_date: Optional[date]
    end_date: Optional[date]
    documents: Any
    comments: Optional[str]
    employee_id: int
    manager_id: Optional[int]
    company_id: int
    created_at: datetime
    updated_at: datetime
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    employee_code: Optional[str] = None
    employee_department: Optional[str] = None
    manager_name: Optional[str] = None
    manager_email: Optional[str] = None
    approvals: Tuple[RequestApproval, ...] = ()

    @property
    def status_kind(self) -> RequestStatus:
        return RequestStatus.parse(self.status)

    @property
    def type_kind(self) -> RequestType:
        return RequestType.parse(self.type)


@dataclass(frozen=True)
class RequestQuery:
    """Filters understood by ``RequestRepository.find``; ``None`` means no filter."""

    employee_id: Optional[int] = None
    # employee_id = X OR manager_id = X
    involving_user_id: Optional[int] = None
    company_id: Optional[int] = None
    status: Optional[str] = None
    type: Optional[str] = None
    limit: int = DEFAULT_LIST_LIMIT
