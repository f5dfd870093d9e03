from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union


class _Unset:
    """Marker for a patch key that was not sent at all."""

    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class Session:
    """Domain entity: a time-boxed session owned by one tenant."""

    session_id: str
    tenant_id: str
    starts_at: datetime
    ends_at: datetime
    title: Optional[str] = None
    group_ids: tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SessionWrite:
    """Full post-validation state handed to the repository on create/update."""

    session_id: str
    tenant_id: str
    starts_at: datetime
    ends_at: datetime
    title: Optional[str]
    group_ids: tuple[str, ...]


@dataclass(frozen=True)
class SessionCreate:
    starts_at: datetime
    ends_at: datetime
    tenant_id: Optional[str] = None
    title: Optional[str] = None
    group_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionPatch:
    """Partial update. UNSET fields keep their current value.

    ``group_ids``: UNSET leaves associations alone, an empty tuple clears
    them, anything else replaces them wholesale.
    """

    tenant_id: Union[str, _Unset, None] = UNSET
    starts_at: Union[datetime, _Unset] = UNSET
    ends_at: Union[datetime, _Unset] = UNSET
    title: Union[str, _Unset, None] = UNSET
    group_ids: Union[tuple[str, ...], _Unset] = UNSET


@dataclass(frozen=True)
class SessionListFilters:
    """Window bounds are inclusive: a session ending exactly at ``window_from`` still overlaps."""

    tenant_id: Optional[str] = None
    group_id: Optional[str] = None
    window_from: Optional[datetime] = None
    window_to: Optional[datetime] = None

