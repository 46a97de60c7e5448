"""Pydantic schemas for note CRUD requests and responses."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from notekeeper.models.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH


class NoteCreate(BaseModel):
    """Body of POST /notes; both fields are trimmed and required."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)


class NoteUpdate(BaseModel):
    """Body of PUT /notes/{id}; omitted fields are left unchanged, provided ones may not be blank."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, min_length=1, max_length=CONTENT_MAX_LENGTH)


class NoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    owner_id: int
    created_at: datetime
    updated_at: datetime


class NoteResponse(BaseModel):
    message: str
    note: NoteOut


class NotesListResponse(BaseModel):
    message: str
    notes: list[NoteOut]


class MessageResponse(BaseModel):
    message: str
