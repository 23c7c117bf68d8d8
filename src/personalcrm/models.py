from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

TAGS = ("family", "friend", "work", "school", "networking", "hobby", "important")
INTERACTION_TYPES = ("call", "meeting", "email", "message", "social", "other")
RECURRENCES = ("daily", "weekly", "monthly", "yearly")


@dataclass
class Interaction:
    id: str = ""
    contact_id: str = ""
    type: str = "other"  # one of INTERACTION_TYPES
    date: datetime | None = None
    notes: str | None = None
    created_at: datetime | None = None
    # fields written by other versions of the app, kept as stored
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Contact:
    id: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    job_title: str | None = None
    address: str | None = None
    notes: str | None = None
    birthday: date | None = None
    last_contacted: datetime | None = None
    reminder_date: datetime | None = None
    image_url: str | None = None
    tags: list[str] = field(default_factory=list)
    interactions: list[Interaction] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Reminder:
    id: str = ""
    contact_id: str = ""
    # copy of the contact as it was when the reminder was created
    contact: Contact | None = None
    title: str = ""
    description: str | None = None
    date: datetime | None = None
    completed: bool = False
    recurring: str | None = None  # one of RECURRENCES
    created_at: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Snapshot:
    contacts: list[Contact] = field(default_factory=list)
    reminders: list[Reminder] = field(default_factory=list)


@dataclass
class DashboardStats:
    total_contacts: int = 0
    new_contacts_this_month: int = 0
    upcoming_reminders: int = 0
    recent_interactions: int = 0


def as_datetime(value: date | datetime | None) -> datetime | None:
    """Widen a bare calendar date to midnight so it compares with timestamps."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, datetime.min.time())


def normalize_contact(contact: Contact) -> Contact:
    """Coerce a contact's date fields in place: ``birthday`` to a date, the rest to datetimes."""
    if isinstance(contact.birthday, datetime):
        contact.birthday = contact.birthday.date()
    contact.last_contacted = as_datetime(contact.last_contacted)
    contact.reminder_date = as_datetime(contact.reminder_date)
    contact.created_at = as_datetime(contact.created_at)
    contact.updated_at = as_datetime(contact.updated_at)
    for interaction in contact.interactions:
        interaction.date = as_datetime(interaction.date)
        interaction.created_at = as_datetime(interaction.created_at)
    return contact
