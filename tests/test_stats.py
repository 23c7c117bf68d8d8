from __future__ import annotations

from datetime import date, datetime, timedelta

from personalcrm.models import Contact, Interaction, Reminder, Snapshot
from personalcrm.services.stats import (
    contacts_to_reconnect,
    dashboard_stats,
    filter_contacts,
    unique_tags,
    upcoming_birthdays,
    upcoming_reminders,
)

NOW = datetime(2024, 6, 15, 12, 0)


def _contact(cid: str, **kwargs) -> Contact:
    kwargs.setdefault("first_name", cid.title())
    kwargs.setdefault("last_name", "Test")
    kwargs.setdefault("created_at", NOW)
    kwargs.setdefault("updated_at", NOW)
    return Contact(id=cid, **kwargs)


def _reminder(rid: str, when: datetime, completed: bool = False) -> Reminder:
    return Reminder(id=rid, contact_id="c", title=rid, date=when, completed=completed)


def test_empty_snapshot():
    stats = dashboard_stats(Snapshot(), now=NOW)
    assert stats.total_contacts == 0
    assert stats.new_contacts_this_month == 0
    assert stats.upcoming_reminders == 0
    assert stats.recent_interactions == 0


def test_new_contacts_this_month():
    snapshot = Snapshot(
        contacts=[
            _contact("today", created_at=NOW),
            _contact("first", created_at=datetime(2024, 6, 1)),
            _contact("lastmonth", created_at=datetime(2024, 5, 31, 23, 59)),
        ]
    )
    stats = dashboard_stats(snapshot, now=NOW)
    assert stats.total_contacts == 3
    assert stats.new_contacts_this_month == 2


def test_upcoming_reminders_count():
    snapshot = Snapshot(
        reminders=[
            _reminder("tomorrow", NOW + timedelta(days=1)),
            _reminder("yesterday", NOW - timedelta(days=1)),
            _reminder("done", NOW + timedelta(days=2), completed=True),
        ]
    )
    assert dashboard_stats(snapshot, now=NOW).upcoming_reminders == 1


def test_recent_interactions_window():
    def interaction(days_ago: float) -> Interaction:
        return Interaction(id=str(days_ago), type="call", date=NOW - timedelta(days=days_ago))

    snapshot = Snapshot(
        contacts=[
            _contact("a", interactions=[interaction(1), interaction(30), interaction(31)]),
            _contact("b", interactions=[interaction(29.5)]),
        ]
    )
    assert dashboard_stats(snapshot, now=NOW).recent_interactions == 3


def test_birthday_in_ten_days_is_upcoming():
    soon = (NOW + timedelta(days=10)).date()
    contact = _contact("soon", birthday=date(1990, soon.month, soon.day))

    assert upcoming_birthdays([contact], now=NOW) == [(contact, soon)]


def test_birthday_earlier_this_year_projects_to_next_year():
    now = datetime(2024, 12, 20, 9, 0)
    passed = _contact("passed", birthday=date(1985, 1, 5))
    far = _contact("far", birthday=date(1985, 3, 1))

    result = upcoming_birthdays([passed, far], now=now)

    assert result == [(passed, date(2025, 1, 5))]


def test_birthday_today_counts():
    contact = _contact("today", birthday=date(1970, 6, 15))
    assert upcoming_birthdays([contact], now=NOW) == [(contact, date(2024, 6, 15))]


def test_birthdays_sorted_and_limited():
    contacts = [
        _contact("d", birthday=date(1990, 7, 10)),
        _contact("a", birthday=date(1990, 6, 16)),
        _contact("none"),
        _contact("c", birthday=date(1990, 7, 1)),
        _contact("b", birthday=date(1990, 6, 20)),
    ]
    result = upcoming_birthdays(contacts, now=NOW)
    assert [c.id for c, _ in result] == ["a", "b", "c"]


def test_leap_day_birthday_in_common_year():
    now = datetime(2023, 2, 20)
    contact = _contact("leap", birthday=date(2000, 2, 29))
    assert upcoming_birthdays([contact], now=now) == [(contact, date(2023, 3, 1))]


def test_contacts_to_reconnect():
    contacts = [
        _contact("recent", last_contacted=NOW - timedelta(days=3)),
        _contact("old", last_contacted=NOW - timedelta(days=60)),
        _contact("never"),
        _contact("older", last_contacted=NOW - timedelta(days=90)),
    ]
    result = contacts_to_reconnect(contacts, now=NOW)
    assert [c.id for c in result] == ["never", "older", "old"]


def test_upcoming_reminders_sorted():
    reminders = [
        _reminder("later", NOW + timedelta(days=5)),
        _reminder("past", NOW - timedelta(hours=1)),
        _reminder("sooner", NOW + timedelta(hours=1)),
        _reminder("done", NOW + timedelta(days=1), completed=True),
    ]
    assert [r.id for r in upcoming_reminders(reminders, now=NOW)] == ["sooner", "later"]


def test_filter_contacts():
    contacts = [
        _contact("ada", first_name="Ada", last_name="Lovelace", tags=["friend"]),
        _contact("grace", first_name="Grace", last_name="Hopper", company="US Navy", tags=["work"]),
        _contact("alan", first_name="Alan", last_name="Turing", email="alan@bletchley.uk"),
    ]
    assert [c.id for c in filter_contacts(contacts)] == ["ada", "grace", "alan"]
    assert [c.id for c in filter_contacts(contacts, search="LOVE")] == ["ada"]
    assert [c.id for c in filter_contacts(contacts, search="navy")] == ["grace"]
    assert [c.id for c in filter_contacts(contacts, search="bletchley")] == ["alan"]
    assert [c.id for c in filter_contacts(contacts, tag="work")] == ["grace"]
    assert filter_contacts(contacts, search="ada", tag="work") == []


def test_unique_tags_in_first_seen_order():
    contacts = [
        _contact("a", tags=["work", "friend"]),
        _contact("b", tags=["friend", "family"]),
    ]
    assert unique_tags(contacts) == ["work", "friend", "family"]
