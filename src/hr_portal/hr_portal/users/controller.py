from __future__ import annotations

from flask import Flask, session

from ..common.http import SESSION_KEY, current_principal, json_body, json_ok
from ..container import Container
from .model import Principal


def serialize_principal(p: Principal) -> dict:
    return {
        "id": p.user_id,
        "name": p.name,
        "email": p.email,
        "role": p.role.value,
        "companyId": p.company_id,
        "employeeId": p.employee_code,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        principal = container.auth_service.authenticate(body.get("email") or "", body.get("password") or "")
        session.clear()
        session[SESSION_KEY] = principal.to_session()
        return json_ok(serialize_principal(principal), message="Logged in")

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return json_ok()

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    def me():
        return json_ok(serialize_principal(current_principal()))
