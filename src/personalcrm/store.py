"""The data store: sole owner of the in-memory snapshot.

Every successful mutation writes the whole snapshot back through the codec
before returning. Operations that name an unknown id do nothing and write
nothing; the ``None``/``False`` return value is the only sign of it.

Values handed out by the store are copies. Changing one has no effect until
it is passed back through ``update_contact``.
"""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable

from personalcrm.codec import load_snapshot, save_snapshot
from personalcrm.models import (
    Contact,
    DashboardStats,
    Interaction,
    Reminder,
    Snapshot,
    as_datetime,
    normalize_contact,
)
from personalcrm.services import stats

logger = logging.getLogger(__name__)

# set by the store, never taken from the caller
_MANAGED_CONTACT_FIELDS = ("id", "interactions", "created_at", "updated_at")


def _new_id() -> str:
    return str(uuid.uuid4())


class CrmStore:
    def __init__(
        self,
        db_path: Path | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._db_path = db_path
        self._clock = clock
        self._snapshot = load_snapshot(db_path)

    # -- reads --------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return copy.deepcopy(self._snapshot)

    @property
    def contacts(self) -> list[Contact]:
        return copy.deepcopy(self._snapshot.contacts)

    @property
    def reminders(self) -> list[Reminder]:
        return copy.deepcopy(self._snapshot.reminders)

    def get_contact(self, contact_id: str) -> Contact | None:
        contact = self._find_contact(contact_id)
        return copy.deepcopy(contact) if contact else None

    def get_reminder(self, reminder_id: str) -> Reminder | None:
        reminder = self._find_reminder(reminder_id)
        return copy.deepcopy(reminder) if reminder else None

    def reminders_for_contact(self, contact_id: str) -> list[Reminder]:
        """The contact's reminders, earliest first."""
        owned = [r for r in self._snapshot.reminders if r.contact_id == contact_id]
        owned.sort(key=lambda r: r.date or datetime.min)
        return copy.deepcopy(owned)

    def get_dashboard_stats(self) -> DashboardStats:
        return stats.dashboard_stats(self._snapshot, now=self._clock())

    # -- contacts -----------------------------------------------------------

    def add_contact(self, **fields: Any) -> Contact:
        now = self._clock()
        for name in _MANAGED_CONTACT_FIELDS:
            fields.pop(name, None)
        fields["tags"] = list(fields.get("tags") or [])

        contact = normalize_contact(
            Contact(**fields, id=_new_id(), interactions=[], created_at=now, updated_at=now)
        )
        self._snapshot.contacts.append(contact)
        self._persist()
        logger.info("Added contact %s", contact.id)
        return copy.deepcopy(contact)

    def update_contact(self, contact: Contact) -> Contact | None:
        for index, existing in enumerate(self._snapshot.contacts):
            if existing.id == contact.id:
                break
        else:
            return None

        updated = normalize_contact(
            replace(
                copy.deepcopy(contact),
                created_at=existing.created_at,
                updated_at=self._clock(),
            )
        )
        self._snapshot.contacts[index] = updated
        # Reminders keep the contact copy taken when they were created.
        self._persist()
        return copy.deepcopy(updated)

    def delete_contact(self, contact_id: str) -> bool:
        if self._find_contact(contact_id) is None:
            return False
        self._snapshot.contacts = [c for c in self._snapshot.contacts if c.id != contact_id]
        self._snapshot.reminders = [
            r for r in self._snapshot.reminders if r.contact_id != contact_id
        ]
        self._persist()
        logger.info("Deleted contact %s and its reminders", contact_id)
        return True

    def add_interaction(
        self,
        contact_id: str,
        type: str,
        date: date | datetime,
        notes: str | None = None,
    ) -> Interaction | None:
        contact = self._find_contact(contact_id)
        if contact is None:
            return None

        now = self._clock()
        interaction = Interaction(
            id=_new_id(),
            contact_id=contact_id,
            type=type,
            date=as_datetime(date),
            notes=notes,
            created_at=now,
        )
        contact.interactions.append(interaction)
        # last_contacted only ever moves forward
        if contact.last_contacted is None or interaction.date > contact.last_contacted:
            contact.last_contacted = interaction.date
        contact.updated_at = now
        self._persist()
        return copy.deepcopy(interaction)

    # -- reminders ----------------------------------------------------------

    def add_reminder(
        self,
        contact_id: str,
        title: str,
        date: date | datetime,
        description: str | None = None,
        completed: bool = False,
        recurring: str | None = None,
    ) -> Reminder | None:
        contact = self._find_contact(contact_id)
        if contact is None:
            return None

        # Point-in-time copy: later edits to the contact do not reach it.
        reminder = Reminder(
            id=_new_id(),
            contact_id=contact_id,
            contact=copy.deepcopy(contact),
            title=title,
            description=description,
            date=as_datetime(date),
            completed=completed,
            recurring=recurring,
            created_at=self._clock(),
        )
        self._snapshot.reminders.append(reminder)
        self._persist()
        return copy.deepcopy(reminder)

    def update_reminder(self, reminder_id: str, completed: bool) -> Reminder | None:
        reminder = self._find_reminder(reminder_id)
        if reminder is None:
            return None
        reminder.completed = completed
        self._persist()
        return copy.deepcopy(reminder)

    def delete_reminder(self, reminder_id: str) -> bool:
        if self._find_reminder(reminder_id) is None:
            return False
        self._snapshot.reminders = [
            r for r in self._snapshot.reminders if r.id != reminder_id
        ]
        self._persist()
        return True

    # -- internals ----------------------------------------------------------

    def _find_contact(self, contact_id: str) -> Contact | None:
        return next((c for c in self._snapshot.contacts if c.id == contact_id), None)

    def _find_reminder(self, reminder_id: str) -> Reminder | None:
        return next((r for r in self._snapshot.reminders if r.id == reminder_id), None)

    def _persist(self) -> None:
        save_snapshot(self._snapshot, self._db_path)
