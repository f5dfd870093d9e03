from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..core.result import Err, Ok, Result
from .datetime_utils import parse_iso_datetime


def require_non_empty(value: Any, field_name: str) -> Result[str]:
    if not isinstance(value, str) or not value.strip():
        return Err(f"{field_name} is required")
    return Ok(value.strip())


def parse_timestamp(value: Any, field_name: str) -> Result[datetime]:
    if isinstance(value, datetime):
        return Ok(value.replace(microsecond=0))
    if not isinstance(value, str) or not value.strip():
        return Err(f"{field_name} must be a valid ISO date")
    try:
        return Ok(parse_iso_datetime(value))
    except ValueError:
        return Err(f"{field_name} must be a valid ISO date")


def parse_optional_timestamp(value: Any, field_name: str) -> Result[Optional[datetime]]:
    if value is None or value == "":
        return Ok(None)
    return parse_timestamp(value, field_name)


def parse_optional_text(value: Any, field_name: str, *, max_length: int) -> Result[Optional[str]]:
    """Trim a free-text field; blank becomes None."""
    if value is None:
        return Ok(None)
    if not isinstance(value, str):
        return Err(f"{field_name} must be a string")
    text = value.strip()
    if len(text) > max_length:
        return Err(f"{field_name} must be at most {max_length} characters")
    return Ok(text or None)


def parse_id_list(value: Any, field_name: str) -> Result[tuple[str, ...]]:
    """Accept None or a list of non-empty id strings; duplicates collapse."""
    if value is None:
        return Ok(())
    if not isinstance(value, (list, tuple)):
        return Err(f"{field_name} must be a list of ids")

    seen: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            return Err(f"{field_name} must be a list of ids")
        item = item.strip()
        if item not in seen:
            seen.append(item)
    return Ok(tuple(seen))
