from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import Priority
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import HRRequest, RequestApproval, RequestQuery
from .repository import RequestRepository

_SELECT = """
    SELECT r.request_id, r.type, r.title, r.description, r.status, r.priority,
           r.start_date, r.end_date, r.documents, r.comments,
           r.employee_id, r.manager_id, r.company_id, r.created_at, r.updated_at,
           e.name AS employee_name, e.email AS employee_email,
           e.employee_code, e.department AS employee_department,
           m.name AS manager_name, m.email AS manager_email
    FROM hr_requests r
    JOIN users e ON e.user_id = r.employee_id
    LEFT JOIN users m ON m.user_id = r.manager_id
"""


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO hr_requests(
                    type, title, description, status, priority, start_date, end_date,
                    documents, employee_id, manager_id, company_id
                )
                VALUES(%s,%s,%s,'PENDING',%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    type,
                    title,
                    description,
                    priority.value,
                    start_date,
                    end_date,
                    dump_json(documents),
                    int(employee_id),
                    manager_id,
                    int(company_id),
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[HRRequest]:
        rows = self._select("r.request_id=%s", [int(request_id)], limit=1)
        return rows[0] if rows else None

    def find(self, query: RequestQuery) -> Sequence[HRRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if query.employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(int(query.employee_id))
        if query.involving_user_id is not None:
            clauses.append("(r.employee_id=%s OR r.manager_id=%s)")
            params.extend([int(query.involving_user_id), int(query.involving_user_id)])
        if query.company_id is not None:
            clauses.append("r.company_id=%s")
            params.append(int(query.company_id))
        if query.status:
            clauses.append("r.status=%s")
            params.append(query.status)
        if query.type:
            clauses.append("r.type=%s")
            params.append(query.type)

        return self._select(" AND ".join(clauses), params, limit=query.limit)

    def update_status(self, *, request_id: int, status: str, comments: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE hr_requests
                SET status=%s, comments=%s, updated_at=NOW()
                WHERE request_id=%s
                """,
                (status, comments, int(request_id)),
            )
            return cur.rowcount > 0

    def add_approval(self, *, request_id: int, approver_id: int, status: str, comments: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO request_approvals(request_id, approver_id, status, comments)
                VALUES(%s,%s,%s,%s)
                """,
                (int(request_id), int(approver_id), status, comments),
            )
            return int(cur.lastrowid)

    def _select(self, where: str, params: list, *, limit: int) -> List[HRRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE {where}
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["request_id"]) for r in rows]
            placeholders = ",".join(["%s"] * len(ids))
            cur.execute(
                f"""
                SELECT a.approval_id, a.request_id, a.approver_id, a.status, a.comments, a.created_at,
                       u.name AS approver_name, u.email AS approver_email
                FROM request_approvals a
                JOIN users u ON u.user_id = a.approver_id
                WHERE a.request_id IN ({placeholders})
                ORDER BY a.created_at ASC, a.approval_id ASC
                """,
                tuple(ids),
            )
            approvals: Dict[int, List[RequestApproval]] = {}
            for a in fetchall(cur):
                approvals.setdefault(int(a["request_id"]), []).append(
                    RequestApproval(
                        approval_id=int(a["approval_id"]),
                        request_id=int(a["request_id"]),
                        approver_id=int(a["approver_id"]),
                        status=a["status"],
                        comments=a.get("comments"),
                        created_at=a["created_at"],
                        approver_name=a.get("approver_name"),
                        approver_email=a.get("approver_email"),
                    )
                )

            return [self._to_request(r, approvals.get(int(r["request_id"]), [])) for r in rows]

    @staticmethod
    def _to_request(r: Dict[str, Any], approvals: List[RequestApproval]) -> HRRequest:
        return HRRequest(
            request_id=int(r["request_id"]),
            type=r["type"],
            title=r["title"],
            description=r.get("description") or "",
            status=r["status"],
            priority=Priority(r["priority"]),
            start_date=r.get("start_date"),
            end_date=r.get("end_date"),
            documents=load_json(r.get("documents")),
            comments=r.get("comments"),
            employee_id=int(r["employee_id"]),
            manager_id=r.get("manager_id"),
            company_id=int(r["company_id"]),
            created_at=r["created_at"],
            updated_at=r["updated_at"],
            employee_name=r.get("employee_name"),
            employee_email=r.get("employee_email"),
            employee_code=r.get("employee_code"),
            employee_department=r.get("employee_department"),
            manager_name=r.get("manager_name"),
            manager_email=r.get("manager_email"),
            approvals=tuple(approvals),
        )
