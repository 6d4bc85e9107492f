from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from src.hr_portal.hr_portal.core.enums import Priority, RequestStatus, RequestType
from src.hr_portal.hr_portal.core.exceptions import (
    AuthorizationError,
    ConnectorError,
    NotFoundError,
    ValidationError,
)
from src.hr_portal.hr_portal.hr_requests.service import RequestInput
from src.hr_portal.hr_portal.users.model import Principal

P = Principal.from_user


def _leave(**overrides) -> RequestInput:
    data = dict(
        type="leave",
        title="Annual leave",
        description="Family trip",
        start_date="2025-04-01",
        end_date="2025-04-05",
    )
    data.update(overrides)
    return RequestInput(**data)


def _submit(world, user, **overrides):
    return world.container.request_service.submit(P(user), _leave(**overrides))


def test_submit_creates_pending_request_assigned_to_first_manager(world):
    seed = world.seed
    result = _submit(world, seed.employee)

    req = result.request
    assert req.status == "PENDING"
    assert req.status_kind == RequestStatus.PENDING
    assert req.type == "LEAVE"
    assert req.type_kind == RequestType.LEAVE
    assert req.priority == Priority.MEDIUM
    assert req.employee_id == seed.employee.user_id
    assert req.manager_id == seed.manager.user_id
    assert req.company_id == 1
    assert req.start_date == date(2025, 4, 1)
    assert req.end_date == date(2025, 4, 5)
    assert req.employee_name == "Eli Employee"
    assert req.manager_name == "Mona Manager"

    assert result.connector_response["success"] is True
    assert result.connector_response["data"]["status"] == "pending"


def test_submit_notifies_manager(world):
    seed = world.seed
    _submit(world, seed.employee)

    inbox = world.notifications.for_user(seed.manager.user_id)
    assert len(inbox) == 1
    assert inbox[0].title == "New HR Request"
    assert inbox[0].message == "Eli Employee has submitted a leave request: Annual leave"
    assert inbox[0].is_read is False


def test_submit_sends_employee_code_to_provider(world):
    _submit(world, world.seed.employee)

    name, args = world.connector.calls[0]
    payload = args[0]
    assert name == "submit_request"
    assert payload.employee_id == "EMP-3"
    assert payload.start_date == "2025-04-01"
    assert payload.to_dict()["employeeId"] == "EMP-3"


def test_submit_without_manager_in_tenant_leaves_request_unassigned(world):
    world.users.users_by_id.pop(world.seed.manager.user_id)

    result = _submit(world, world.seed.employee)

    assert result.request.manager_id is None
    assert result.request.manager_name is None
    assert world.notifications.items == {}


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"title": "  "}, "Title is required"),
        ({"type": None}, "Type is required"),
        ({"description": ""}, "Description is required"),
        ({"priority": "urgent"}, "Priority must be one of"),
        ({"start_date": "01/04/2025"}, "Start date must be a date"),
        ({"start_date": "2025-04-05", "end_date": "2025-04-01"}, "End date must be on or after start date"),
        ({"priority": 1}, "Priority must be a string"),
        ({"start_date": 20250401}, "Start date must be a string"),
        ({"title": ["Annual leave"]}, "Title must be a string"),
        ({"description": {"text": "trip"}}, "Description must be a string"),
        ({"title": "x" * 201}, "Title must be at most 200 characters"),
        ({"type": "t" * 65}, "Type must be at most 64 characters"),
    ],
)
def test_submit_rejects_invalid_input_before_calling_provider(world, overrides, message):
    with pytest.raises(ValidationError, match=message):
        _submit(world, world.seed.employee, **overrides)

    assert world.connector.calls == []
    assert world.requests.rows == {}


def test_submit_accepts_priority_case_insensitively(world):
    result = _submit(world, world.seed.employee, priority="high")
    assert result.request.priority == Priority.HIGH


def test_submit_by_inactive_user_is_not_found(world):
    seed = world.seed
    world.users.users_by_id[seed.employee.user_id] = replace(seed.employee, is_active=False)

    with pytest.raises(NotFoundError):
        _submit(world, seed.employee)


def test_provider_failure_on_submit_writes_nothing(world):
    world.connector.failing.add("submit_request")

    with pytest.raises(ConnectorError):
        _submit(world, world.seed.employee)

    assert world.requests.rows == {}
    assert world.notifications.items == {}


def test_manager_approves_request(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id

    updated = world.container.request_service.update_status(
        P(seed.manager), request_id=rid, status="approved", comments="Enjoy"
    )

    assert updated.status == "APPROVED"
    assert updated.comments == "Enjoy"
    assert len(updated.approvals) == 1
    approval = updated.approvals[0]
    assert approval.approver_id == seed.manager.user_id
    assert approval.status == "APPROVED"
    assert approval.approver_name == "Mona Manager"

    inbox = world.notifications.for_user(seed.employee.user_id)
    assert [n.message for n in inbox] == ["Your LEAVE request has been approved"]
    assert inbox[0].title == "HR Request Update"

    assert world.connector.calls[-1] == ("update_request_status", (str(rid), "approved", "Enjoy"))


def test_admin_can_move_request_to_any_status_text(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id

    updated = world.container.request_service.update_status(
        P(seed.admin), request_id=rid, status="on_hold"
    )

    assert updated.status == "ON_HOLD"
    assert updated.status_kind == RequestStatus.UNRECOGNIZED


def test_every_status_change_appends_an_approval(world):
    seed = world.seed
    svc = world.container.request_service
    rid = _submit(world, seed.employee).request.request_id

    svc.update_status(P(seed.manager), request_id=rid, status="APPROVED")
    svc.update_status(P(seed.admin), request_id=rid, status="CANCELLED", comments="Plans changed")

    final = svc.get(P(seed.employee), rid)
    assert final.status == "CANCELLED"
    assert [a.status for a in final.approvals] == ["APPROVED", "CANCELLED"]
    assert [a.approver_id for a in final.approvals] == [seed.manager.user_id, seed.admin.user_id]


def test_employee_cannot_update_status(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id

    with pytest.raises(AuthorizationError):
        world.container.request_service.update_status(
            P(seed.employee), request_id=rid, status="APPROVED"
        )

    assert world.requests.get(rid).status == "PENDING"


def test_update_status_requires_request_id_and_status(world):
    manager = P(world.seed.manager)
    svc = world.container.request_service

    with pytest.raises(ValidationError, match="Request ID is required"):
        svc.update_status(manager, request_id=None, status="APPROVED")
    with pytest.raises(ValidationError, match="Status is required"):
        svc.update_status(manager, request_id=1, status=" ")


def test_update_status_rejects_malformed_status_and_comments(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id
    svc = world.container.request_service

    with pytest.raises(ValidationError, match="Status must be at most 64 characters"):
        svc.update_status(P(seed.manager), request_id=rid, status="A" * 65)
    with pytest.raises(ValidationError, match="Status must be a string"):
        svc.update_status(P(seed.manager), request_id=rid, status=1)
    with pytest.raises(ValidationError, match="Comments must be a string"):
        svc.update_status(P(seed.manager), request_id=rid, status="APPROVED", comments=5)

    assert world.requests.get(rid).status == "PENDING"
    assert world.connector.names() == ["submit_request"]


def test_status_of_64_characters_is_accepted(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id

    updated = world.container.request_service.update_status(P(seed.manager), request_id=rid, status="w" * 64)

    assert updated.status == "W" * 64
    assert updated.status_kind == RequestStatus.UNRECOGNIZED


def test_update_unknown_request_is_not_found(world):
    with pytest.raises(NotFoundError):
        world.container.request_service.update_status(
            P(world.seed.manager), request_id=999, status="APPROVED"
        )


def test_manager_of_another_tenant_cannot_update(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id

    with pytest.raises(NotFoundError):
        world.container.request_service.update_status(
            P(seed.other_manager), request_id=rid, status="REJECTED"
        )

    assert world.requests.get(rid).status == "PENDING"
    assert world.requests.approvals == []


def test_provider_failure_on_update_rolls_back_local_changes(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id
    world.connector.failing.add("update_request_status")

    with pytest.raises(ConnectorError):
        world.container.request_service.update_status(
            P(seed.manager), request_id=rid, status="APPROVED"
        )

    assert world.requests.get(rid).status == "PENDING"
    assert world.requests.approvals == []
    assert world.notifications.for_user(seed.employee.user_id) == []
    assert world.tx.rolled_back == 1


def test_employee_lists_only_own_requests(world):
    seed = world.seed
    _submit(world, seed.employee, title="Mine")
    _submit(world, seed.coworker, title="Theirs")

    items = world.container.request_service.list_requests(
        P(seed.employee), employee_id=seed.coworker.user_id
    )

    assert [r.title for r in items] == ["Mine"]


def test_manager_lists_requests_involving_them(world):
    seed = world.seed
    _submit(world, seed.employee, title="First")
    _submit(world, seed.coworker, title="Second")
    _submit(world, seed.other_employee, title="Elsewhere")

    items = world.container.request_service.list_requests(P(seed.manager))

    # Newest first.
    assert [r.title for r in items] == ["Second", "First"]


def test_manager_can_list_a_specific_employee(world):
    seed = world.seed
    _submit(world, seed.employee, title="First")
    _submit(world, seed.coworker, title="Second")

    items = world.container.request_service.list_requests(
        P(seed.manager), employee_id=str(seed.coworker.user_id)
    )

    assert [r.title for r in items] == ["Second"]


def test_admin_lists_whole_tenant_with_filters(world):
    seed = world.seed
    svc = world.container.request_service
    first = _submit(world, seed.employee, title="Leave").request.request_id
    _submit(world, seed.coworker, type="document_request", title="Certificate")
    _submit(world, seed.other_employee, title="Elsewhere")
    svc.update_status(P(seed.manager), request_id=first, status="APPROVED")

    admin = P(seed.admin)
    assert {r.title for r in svc.list_requests(admin)} == {"Leave", "Certificate"}
    assert [r.title for r in svc.list_requests(admin, status="approved")] == ["Leave"]
    assert [r.title for r in svc.list_requests(admin, type="Document_Request")] == ["Certificate"]
    assert [r.title for r in svc.list_requests(admin, employee_id=seed.coworker.user_id)] == ["Certificate"]


def test_employee_cannot_read_someone_elses_request(world):
    seed = world.seed
    rid = _submit(world, seed.coworker).request.request_id

    with pytest.raises(NotFoundError):
        world.container.request_service.get(P(seed.employee), rid)

    assert world.container.request_service.get(P(seed.coworker), rid).request_id == rid


def test_admin_of_another_tenant_cannot_read_request(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id
    foreign_admin = replace(P(seed.admin), company_id=2)

    with pytest.raises(NotFoundError):
        world.container.request_service.get(foreign_admin, rid)


def test_submit_takes_tenant_from_stored_user_not_session(world):
    seed = world.seed
    stale = replace(P(seed.employee), company_id=2)

    result = world.container.request_service.submit(stale, _leave())

    assert result.request.company_id == 1
    assert result.request.manager_id == seed.manager.user_id
    assert world.notifications.for_user(seed.other_manager.user_id) == []


def test_manager_reads_any_request_of_own_tenant_by_id(world):
    seed = world.seed
    rid = _submit(world, seed.employee).request.request_id
    # Unassigned: the reading manager is neither requester nor approver.
    world.requests.rows[rid] = replace(world.requests.rows[rid], manager_id=None)
    svc = world.container.request_service

    assert svc.get(P(seed.manager), rid).request_id == rid
    with pytest.raises(NotFoundError):
        svc.get(P(seed.other_manager), rid)


def test_listing_filters_must_be_text(world):
    with pytest.raises(ValidationError, match="Status must be a string"):
        world.container.request_service.list_requests(P(world.seed.admin), status=["APPROVED"])
