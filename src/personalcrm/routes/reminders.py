from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from personalcrm.codec import to_dict
from personalcrm.schemas import ReminderIn, ReminderUpdate
from personalcrm.store import CrmStore

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


def _store(request: Request) -> CrmStore:
    return request.app.state.store


@router.get("")
async def list_reminders(request: Request, pending: bool = False):
    reminders = _store(request).reminders
    if pending:
        reminders = [r for r in reminders if not r.completed]
    return [to_dict(r) for r in reminders]


@router.post("", status_code=201)
async def create_reminder(request: Request, data: ReminderIn):
    reminder = _store(request).add_reminder(**data.model_dump())
    if not reminder:
        raise HTTPException(status_code=404, detail="Contact not found")
    return to_dict(reminder)


@router.patch("/{reminder_id}")
async def update_reminder(request: Request, reminder_id: str, data: ReminderUpdate):
    reminder = _store(request).update_reminder(reminder_id, data.completed)
    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return to_dict(reminder)


@router.delete("/{reminder_id}")
async def delete_reminder(request: Request, reminder_id: str):
    if not _store(request).delete_reminder(reminder_id):
        raise HTTPException(status_code=404, detail="Reminder not found")
    return {"success": True}
