from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import Priority
from .model import HRRequest, RequestQuery


class RequestRepository(Protocol):
    def create(
        self,
        *,
        type: str,
        title: str,
        description: str,
        priority: Priority,
        start_date: Optional[date],
        end_date: Optional[date],
        documents: Any,
        employee_id: int,
        manager_id: Optional[int],
        company_id: int,
    ) -> int:
        """Insert a PENDING request and return its id."""

        raise NotImplementedError

    def get(self, request_id: int) -> Optional[HRRequest]:
        raise NotImplementedError

    def find(self, query: RequestQuery) -> Sequence[HRRequest]:
        """Newest first, each with its approval history."""

        raise NotImplementedError

    def update_status(self, *, request_id: int, status: str, comments: Optional[str]) -> bool:
        raise NotImplementedError

    def add_approval(self, *, request_id: int, approver_id: int, status: str, comments: Optional[str]) -> int:
        raise NotImplementedError
