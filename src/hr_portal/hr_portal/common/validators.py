from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def optional_text(value: object, field_name: str, *, max_length: Optional[int] = None) -> Optional[str]:
    """Stripped text or ``None``; JSON numbers, lists and objects are rejected."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    text = value.strip()
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return text or None


def require_non_empty(value: object, field_name: str, *, max_length: Optional[int] = None) -> str:
    text = optional_text(value, field_name, max_length=max_length)
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def require_present(value: object, field_name: str) -> object:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    return value


def require_enum(value: object, enum_cls: Type[E], field_name: str, *, default: Optional[E] = None) -> E:
    """Case-insensitive lookup of a closed enumeration."""
    text = (optional_text(value, field_name) or "").upper()
    if not text:
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return enum_cls(text)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_int(value: object, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
