from __future__ import annotations

from fastapi import APIRouter, Request

from personalcrm.codec import to_dict
from personalcrm.services import stats

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
async def dashboard(request: Request):
    store = request.app.state.store
    contacts = store.contacts
    return {
        "stats": to_dict(store.get_dashboard_stats()),
        "upcomingBirthdays": [
            {**to_dict(contact), "nextBirthday": occurs}
            for contact, occurs in stats.upcoming_birthdays(contacts)
        ],
        "reconnectSuggestions": [to_dict(c) for c in stats.contacts_to_reconnect(contacts)],
        "upcomingReminders": [to_dict(r) for r in stats.upcoming_reminders(store.reminders)],
        "tags": stats.unique_tags(contacts),
    }
