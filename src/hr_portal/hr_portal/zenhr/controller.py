from __future__ import annotations

from flask import Flask

from ..common.http import current_principal, json_ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    @app.route("/employees", methods=["GET"], endpoint="list_employees")
    def list_employees():
        """Tenant employee directory as the external HR provider knows it."""
        principal = current_principal()
        if principal.role not in {Role.MANAGER, Role.ADMIN}:
            raise AuthorizationError("Only managers and admins can list employees")
        company = str(principal.company_id) if principal.company_id is not None else None
        employees = container.connector.fetch_all_employees(company)
        return json_ok([e.to_dict() for e in employees])
