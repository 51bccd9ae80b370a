"""
Calendar subsystem package.

• ``BaseCalendarStore`` – abstract async read interface (see base.py).
• ``MonthWindow`` – timezone boundary of one calendar month (window.py).
• ``get_calendar_store()`` – factory returning the store named explicitly
  or by ``settings.CALENDAR_STORE``.

Store modules are imported lazily (``importlib.import_module``) so the
in-memory store works without touching the ORM or the database engine.
"""
from __future__ import annotations

import importlib
from typing import Dict, Optional, Tuple, Type

from sqlalchemy.ext.asyncio import AsyncSession

from planner.config import settings

from .base import (
    BaseCalendarStore,
    CalendarUser,
    LabelRef,
    RecurringEventWindow,
    ScheduledSpan,
    validate_label_ownership,
)
from .window import MonthWindow


# --- Registry: name -> (module, class) ---
_STORE_CLASSES: Dict[str, Tuple[str, str]] = {
    "sql": (".sql", "SqlCalendarStore"),
    "memory": (".memory", "InMemoryCalendarStore"),
}

_SHARED_STORES: Dict[str, BaseCalendarStore] = {}


def _lazy_import(module_suffix: str, class_name: str) -> Type[BaseCalendarStore]:
    """
    _lazy_import(".memory", "InMemoryCalendarStore")  ->  <class InMemoryCalendarStore>
    """
    module = importlib.import_module(module_suffix, package=__name__)
    return getattr(module, class_name)


def get_calendar_store(
    name: Optional[str] = None, db_session: Optional[AsyncSession] = None
) -> BaseCalendarStore:
    """
    Return a calendar store instance.

    Args:
        name (Optional[str]): Store name (case-insensitive); defaults to
            ``settings.CALENDAR_STORE``.
        db_session (Optional[AsyncSession]): Session for the ``sql`` store.

    The ``sql`` store is built per session; the ``memory`` store is one
    process-wide instance, so data added to it survives across requests.

    Raises:
        ValueError: Unknown store name, or ``sql`` requested without a session.
    """
    store_key = (name or settings.CALENDAR_STORE).lower()
    try:
        module_suffix, class_name = _STORE_CLASSES[store_key]
    except KeyError as exc:
        raise ValueError(f"Unknown calendar store: {store_key}") from exc

    store_cls = _lazy_import(module_suffix, class_name)
    if store_key == "sql":
        if db_session is None:
            raise ValueError("The 'sql' calendar store requires a database session")
        return store_cls(db_session)

    # Session-less stores live for the whole process
    store = _SHARED_STORES.get(store_key)
    if store is None:
        store = _SHARED_STORES[store_key] = store_cls()
    return store


__all__: list[str] = [
    "BaseCalendarStore",
    "CalendarUser",
    "LabelRef",
    "MonthWindow",
    "RecurringEventWindow",
    "ScheduledSpan",
    "get_calendar_store",
    "validate_label_ownership",
]
