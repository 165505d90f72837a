from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from prepwise.core.exceptions import InputValidationError


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""

    return datetime.now(timezone.utc)


def iso(value: Any) -> Optional[str]:
    """ISO-8601 string for a datetime (naive values are taken as UTC)."""

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
    if value is None:
        return None
    return str(value)


def require_fields(**fields: Any) -> None:
    """Raise `InputValidationError` naming every blank or missing field."""

    missing = [name for name, value in fields.items() if not str(value or "").strip()]
    if missing:
        raise InputValidationError(
            f"Missing required field(s): {', '.join(missing)}", details={"missing": missing}
        )


__all__ = ["iso", "require_fields", "utcnow"]
