from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[object], field_name: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def normalize_matric(value: Optional[str]) -> str:
    """Matric numbers are compared and stored upper-case."""
    return require_non_empty(value, "Matric number").upper()
