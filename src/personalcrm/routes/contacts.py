from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from fastapi import APIRouter, HTTPException, Request

from personalcrm.codec import to_dict
from personalcrm.schemas import ContactIn, InteractionIn
from personalcrm.services.stats import filter_contacts
from personalcrm.store import CrmStore

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


def _store(request: Request) -> CrmStore:
    return request.app.state.store


@router.get("")
async def list_contacts(request: Request, search: str = "", tag: str | None = None):
    contacts = filter_contacts(_store(request).contacts, search=search, tag=tag)
    return [to_dict(c) for c in contacts]


@router.post("", status_code=201)
async def create_contact(request: Request, data: ContactIn):
    contact = _store(request).add_contact(**data.model_dump())
    return to_dict(contact)


@router.get("/{contact_id}")
async def contact_detail(request: Request, contact_id: str):
    contact = _store(request).get_contact(contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    contact.interactions.sort(key=lambda i: i.date or datetime.min, reverse=True)
    return to_dict(contact)


@router.put("/{contact_id}")
async def update_contact(request: Request, contact_id: str, data: ContactIn):
    store = _store(request)
    existing = store.get_contact(contact_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Contact not found")
    contact = store.update_contact(replace(existing, **data.model_dump(exclude_unset=True)))
    return to_dict(contact)


@router.delete("/{contact_id}")
async def delete_contact(request: Request, contact_id: str):
    if not _store(request).delete_contact(contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"success": True}


@router.post("/{contact_id}/interactions", status_code=201)
async def add_interaction(request: Request, contact_id: str, data: InteractionIn):
    interaction = _store(request).add_interaction(contact_id, **data.model_dump())
    if not interaction:
        raise HTTPException(status_code=404, detail="Contact not found")
    return to_dict(interaction)


@router.get("/{contact_id}/reminders")
async def contact_reminders(request: Request, contact_id: str):
    store = _store(request)
    if not store.get_contact(contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return [to_dict(r) for r in store.reminders_for_contact(contact_id)]
