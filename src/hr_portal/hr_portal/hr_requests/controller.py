from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_date, format_datetime
from ..common.http import current_principal, json_body, json_ok
from ..container import Container
from .model import HRRequest, RequestApproval
from .service import RequestInput


def serialize_approval(a: RequestApproval) -> dict:
    return {
        "id": a.approval_id,
        "requestId": a.request_id,
        "approverId": a.approver_id,
        "status": a.status,
        "comments": a.comments,
        "createdAt": format_datetime(a.created_at),
        "approver": {"name": a.approver_name, "email": a.approver_email},
    }


def serialize_request(r: HRRequest) -> dict:
    return {
        "id": r.request_id,
        "type": r.type,
        "title": r.title,
        "description": r.description,
        "status": r.status,
        "priority": r.priority.value,
        "startDate": format_date(r.start_date),
        "endDate": format_date(r.end_date),
        "documents": r.documents,
        "comments": r.comments,
        "createdAt": format_datetime(r.created_at),
        "updatedAt": format_datetime(r.updated_at),
        "employeeId": r.employee_id,
        "managerId": r.manager_id,
        "companyId": r.company_id,
        "employee": {
            "name": r.employee_name,
            "email": r.employee_email,
            "employeeId": r.employee_code,
            "department": r.employee_department,
        },
        "manager": {"name": r.manager_name, "email": r.manager_email} if r.manager_id else None,
        "approvals": [serialize_approval(a) for a in r.approvals],
    }


def register(app: Flask, container: Container) -> None:
    service = container.request_service

    @app.route("/hr-request", methods=["POST"], endpoint="submit_hr_request")
    def submit_hr_request():
        principal = current_principal()
        body = json_body()
        result = service.submit(
            principal,
            RequestInput(
                type=body.get("type"),
                title=body.get("title"),
                description=body.get("description"),
                start_date=body.get("startDate"),
                end_date=body.get("endDate"),
                priority=body.get("priority"),
                documents=body.get("documents"),
            ),
        )
        return json_ok(
            {"hrRequest": serialize_request(result.request), "zenhrResponse": result.connector_response},
            message="HR request submitted successfully",
        )

    @app.route("/hr-request", methods=["GET"], endpoint="list_hr_requests")
    def list_hr_requests():
        principal = current_principal()
        items = service.list_requests(
            principal,
            status=request.args.get("status"),
            type=request.args.get("type"),
            employee_id=request.args.get("employeeId"),
        )
        return json_ok([serialize_request(r) for r in items])

    @app.route("/hr-request/<int:request_id>", methods=["GET"], endpoint="get_hr_request")
    def get_hr_request(request_id: int):
        principal = current_principal()
        return json_ok(serialize_request(service.get(principal, request_id)))

    @app.route("/hr-request", methods=["PATCH"], endpoint="update_hr_request")
    def update_hr_request():
        principal = current_principal()
        body = json_body()
        updated = service.update_status(
            principal,
            request_id=body.get("requestId"),
            status=body.get("status"),
            comments=body.get("comments"),
        )
        return json_ok(serialize_request(updated), message="HR request status updated successfully")
