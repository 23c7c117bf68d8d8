"""
Request bodies for the JSON API.

Input validation lives here rather than in the store: names must be
non-empty, and tags, interaction types and recurrences must come from the
fixed vocabularies in ``personalcrm.models``. Fields are accepted in
camelCase (as stored) or snake_case.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from personalcrm.models import INTERACTION_TYPES, RECURRENCES, TAGS

Tag = Literal[TAGS]
InteractionType = Literal[INTERACTION_TYPES]
Recurrence = Literal[RECURRENCES]


def _naive_local(value: datetime) -> datetime:
    # the store compares against naive local time
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


LocalDatetime = Annotated[datetime, AfterValidator(_naive_local)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactIn(_CamelModel):
    first_name: str = Field(..., min_length=1, description="Given name")
    last_name: str = Field(..., min_length=1, description="Family name")
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    job_title: str | None = None
    address: str | None = None
    notes: str | None = None
    birthday: date | None = None
    last_contacted: LocalDatetime | None = None
    reminder_date: LocalDatetime | None = None
    image_url: str | None = Field(None, description="URL or data URI of a picture")
    tags: list[Tag] = Field(default_factory=list)


class InteractionIn(_CamelModel):
    type: InteractionType = "call"
    date: LocalDatetime = Field(default_factory=datetime.now, description="When it happened")
    notes: str | None = None


class ReminderIn(_CamelModel):
    contact_id: str
    title: str = Field(..., min_length=1)
    description: str | None = None
    date: LocalDatetime = Field(..., description="When the reminder is due")
    completed: bool = False
    recurring: Recurrence | None = None


class ReminderUpdate(_CamelModel):
    completed: bool
