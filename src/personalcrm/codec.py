"""Snapshot <-> JSON text, stored under a single local storage key.

Field names are written in camelCase. Any key listed in ``DATE_FIELDS`` is
written as an ISO-8601 string and revived as a ``date``/``datetime`` on load;
everything else keeps its JSON type. Keys a record does not know about are
kept in its ``extra`` dict and written back unchanged.
"""

from __future__ import annotations

import json
import logging
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

from personalcrm.db import get_item, init_db, set_item
from personalcrm.models import (
    Contact,
    Interaction,
    Reminder,
    Snapshot,
    as_datetime,
    normalize_contact,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "personal-crm-data"

DATE_FIELDS = frozenset(
    {"birthday", "lastContacted", "reminderDate", "date", "createdAt", "updatedAt"}
)


class CodecError(ValueError):
    """Stored text could not be turned back into a snapshot."""


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_dict(obj: Any) -> Any:
    """Camel-cased plain data for a model object; dates are left as objects."""
    if is_dataclass(obj):
        data = {
            _camel(f.name): to_dict(getattr(obj, f.name)) for f in fields(obj) if f.name != "extra"
        }
        for key, value in getattr(obj, "extra", {}).items():
            data.setdefault(key, value)
        return data
    if isinstance(obj, list):
        return [to_dict(item) for item in obj]
    return obj


def _default(obj: Any) -> str:
    # datetime is a subclass of date, both serialise the same way
    if isinstance(obj, date):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode(snapshot: Snapshot) -> str:
    return json.dumps(to_dict(snapshot), default=_default)


def _parse_date(value: str) -> date | datetime:
    if len(value) == 10:
        return date.fromisoformat(value)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        # browser-written timestamps end in "Z"; keep everything naive local time
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _revive(obj: dict[str, Any]) -> dict[str, Any]:
    for key, value in obj.items():
        if key not in DATE_FIELDS:
            continue
        if not value:
            obj[key] = None
        elif isinstance(value, str):
            obj[key] = _parse_date(value)
        else:
            raise CodecError(f"{key!r} is not a date string: {value!r}")
    return obj


def _build(cls: type, data: Any) -> Any:
    if not isinstance(data, dict):
        raise CodecError(f"expected an object for {cls.__name__}, got {type(data).__name__}")
    names = {_camel(f.name): f.name for f in fields(cls) if f.name != "extra"}
    known = {names[key]: value for key, value in data.items() if key in names}
    extra = {key: value for key, value in data.items() if key not in names}
    return cls(**known, extra=extra)


def _list(data: dict[str, Any], key: str) -> list:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise CodecError(f"{key!r} must be a list")
    return value


def _build_contact(data: Any) -> Contact:
    contact = _build(Contact, data)
    contact.interactions = [_build(Interaction, item) for item in contact.interactions or []]
    contact.tags = list(contact.tags or [])
    return normalize_contact(contact)


def _build_reminder(data: Any) -> Reminder:
    reminder = _build(Reminder, data)
    reminder.date = as_datetime(reminder.date)
    reminder.created_at = as_datetime(reminder.created_at)
    if reminder.contact is not None:
        reminder.contact = _build_contact(reminder.contact)
    return reminder


def decode(text: str) -> Snapshot:
    try:
        data = json.loads(text, object_hook=_revive)
        if not isinstance(data, dict):
            raise CodecError("stored data is not an object")
        return Snapshot(
            contacts=[_build_contact(item) for item in _list(data, "contacts")],
            reminders=[_build_reminder(item) for item in _list(data, "reminders")],
        )
    except CodecError:
        raise
    except (ValueError, TypeError) as exc:
        raise CodecError(str(exc)) from exc


def load_snapshot(db_path: Path | None = None) -> Snapshot:
    """Read the stored snapshot, falling back to an empty one.

    Unreadable data is logged and discarded rather than raised, so a corrupt
    blob never stops the application from starting.
    """
    init_db(db_path)
    text = get_item(STORAGE_KEY, db_path)
    if text is None:
        return Snapshot()
    try:
        snapshot = decode(text)
    except CodecError:
        logger.exception("Error parsing stored data, starting with an empty snapshot")
        return Snapshot()
    logger.info(
        "Loaded %d contacts and %d reminders", len(snapshot.contacts), len(snapshot.reminders)
    )
    return snapshot


def save_snapshot(snapshot: Snapshot, db_path: Path | None = None) -> None:
    set_item(STORAGE_KEY, encode(snapshot), db_path)
    logger.debug("Saved snapshot under %s", STORAGE_KEY)
