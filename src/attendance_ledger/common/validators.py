from __future__ import annotations

from typing import Any, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E")


def require_id(value: Any, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid") from None
    if parsed <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return parsed


def require_enum(value: Any, enum_type: Type[E], field_name: str) -> E:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).upper())  # type: ignore[call-arg]
    except ValueError:
        raise ValidationError(f"{field_name} is invalid: {value!r}") from None
