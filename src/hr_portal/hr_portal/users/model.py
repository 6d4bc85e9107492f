from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a stored user row.

    Plain data object; no DB access code here.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    employee_code: Optional[str]
    company_id: Optional[int]
    department: Optional[str] = None
    position: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Principal:
    """Authenticated actor attached to every workflow call."""

    user_id: int
    name: str
    email: str
    role: Role
    company_id: Optional[int]
    employee_code: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            company_id=user.company_id,
            employee_code=user.employee_code,
        )

    def to_session(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "company_id": self.company_id,
            "employee_code": self.employee_code,
        }

    @classmethod
    def from_session(cls, data: Mapping[str, Any]) -> "Principal":
        company_id = data.get("company_id")
        return cls(
            user_id=int(data["user_id"]),
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=Role(data["role"]),
            company_id=int(company_id) if company_id is not None else None,
            employee_code=data.get("employee_code"),
        )
