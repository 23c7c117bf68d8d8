from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from personalcrm.models import Contact, DashboardStats, Reminder, Snapshot

RECENT_DAYS = 30


def dashboard_stats(snapshot: Snapshot, now: datetime | None = None) -> DashboardStats:
    """Aggregate counts for the dashboard, recomputed from ``snapshot``."""
    now = now or datetime.now()
    first_of_month = datetime(now.year, now.month, 1)
    recent_cutoff = now - timedelta(days=RECENT_DAYS)

    return DashboardStats(
        total_contacts=len(snapshot.contacts),
        new_contacts_this_month=sum(
            1 for c in snapshot.contacts if c.created_at and c.created_at >= first_of_month
        ),
        upcoming_reminders=sum(
            1 for r in snapshot.reminders if not r.completed and r.date and r.date >= now
        ),
        recent_interactions=sum(
            1
            for c in snapshot.contacts
            for i in c.interactions
            if i.date and i.date >= recent_cutoff
        ),
    )


def _in_year(birthday: date, year: int) -> date:
    try:
        return date(year, birthday.month, birthday.day)
    except ValueError:
        # Feb 29 outside a leap year
        return date(year, 3, 1)


def _next_occurrence(birthday: date, today: date) -> date:
    """The birthday's month/day on or after ``today``."""
    occurrence = _in_year(birthday, today.year)
    if occurrence < today:
        occurrence = _in_year(birthday, today.year + 1)
    return occurrence


def upcoming_birthdays(
    contacts: Iterable[Contact],
    now: datetime | None = None,
    days: int = 30,
    limit: int = 3,
) -> list[tuple[Contact, date]]:
    """Contacts whose next birthday is within ``days``, soonest first."""
    today = (now or datetime.now()).date()
    end = today + timedelta(days=days)

    upcoming = []
    for contact in contacts:
        if contact.birthday is None:
            continue
        occurrence = _next_occurrence(contact.birthday, today)
        if occurrence <= end:
            upcoming.append((contact, occurrence))
    upcoming.sort(key=lambda pair: pair[1])
    return upcoming[:limit]


def contacts_to_reconnect(
    contacts: Iterable[Contact],
    now: datetime | None = None,
    days: int = RECENT_DAYS,
    limit: int = 3,
) -> list[Contact]:
    """Contacts not reached in ``days``, never-contacted ones first."""
    cutoff = (now or datetime.now()) - timedelta(days=days)
    stale = [c for c in contacts if c.last_contacted is None or c.last_contacted < cutoff]
    stale.sort(key=lambda c: c.last_contacted or datetime.min)
    return stale[:limit]


def upcoming_reminders(
    reminders: Iterable[Reminder],
    now: datetime | None = None,
    limit: int | None = 5,
) -> list[Reminder]:
    now = now or datetime.now()
    pending = [r for r in reminders if not r.completed and r.date and r.date >= now]
    pending.sort(key=lambda r: r.date)
    return pending[:limit]


def filter_contacts(
    contacts: Iterable[Contact], search: str = "", tag: str | None = None
) -> list[Contact]:
    """Match ``search`` against name, email and company; optionally require ``tag``."""
    needle = search.strip().lower()

    def matches(contact: Contact) -> bool:
        if tag and tag not in contact.tags:
            return False
        if not needle:
            return True
        haystacks = (contact.full_name, contact.email or "", contact.company or "")
        return any(needle in h.lower() for h in haystacks)

    return [c for c in contacts if matches(c)]


def unique_tags(contacts: Iterable[Contact]) -> list[str]:
    seen: dict[str, None] = {}
    for contact in contacts:
        for tag in contact.tags:
            seen.setdefault(tag, None)
    return list(seen)
