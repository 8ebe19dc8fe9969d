from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import SubjectGroup
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_int(value: object, field_name: str, *, minimum: Optional[int] = None) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    return number


def require_group(value: object, field_name: str = "group") -> SubjectGroup:
    group = SubjectGroup.parse(value)
    if group is None:
        allowed = ", ".join(g.value for g in SubjectGroup)
        raise ValidationError(f"{field_name} must be one of: {allowed}")
    return group


def require_groups(values: object, field_name: str = "groups") -> Sequence[SubjectGroup]:
    """Validate a non-empty collection of tags, dropping duplicates but keeping order."""
    if isinstance(values, str) or not isinstance(values, Iterable):
        raise ValidationError(f"{field_name} must be a non-empty list")
    out: list[SubjectGroup] = []
    for v in values:
        group = require_group(v, field_name)
        if group not in out:
            out.append(group)
    if not out:
        raise ValidationError(f"{field_name} must be a non-empty list")
    return tuple(out)
