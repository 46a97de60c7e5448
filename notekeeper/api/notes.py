"""Notes CRUD, scoped to the authenticated user. Foreign and missing ids are both 404."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from notekeeper.api.auth import get_current_user
from notekeeper.core.database import get_db
from notekeeper.models import Note
from notekeeper.schemas.auth import CurrentUser
from notekeeper.schemas.notes import (
    MessageResponse,
    NoteCreate,
    NoteOut,
    NoteResponse,
    NotesListResponse,
    NoteUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()

# Ids outside the database integer range can never exist; reject them as malformed.
NoteId = Annotated[int, Path(ge=1, le=2**31 - 1)]


def _get_owned_note(db: Session, note_id: int, owner_id: int) -> Note:
    note = db.query(Note).filter(Note.id == note_id, Note.owner_id == owner_id).first()
    if note is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return note


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def create_note(
    body: NoteCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> NoteResponse:
    """Create a note owned by the caller."""
    note = Note(title=body.title, content=body.content, owner_id=user.id)
    db.add(note)
    _commit(db)
    db.refresh(note)
    return NoteResponse(message="Note created successfully", note=NoteOut.model_validate(note))


@router.get("", response_model=NotesListResponse)
def list_notes(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> NotesListResponse:
    """List the caller's notes, newest first."""
    notes = (
        db.query(Note)
        .filter(Note.owner_id == user.id)
        .order_by(Note.created_at.desc(), Note.id.desc())
        .all()
    )
    return NotesListResponse(
        message="Notes retrieved successfully",
        notes=[NoteOut.model_validate(n) for n in notes],
    )


@router.put("/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: NoteId,
    body: NoteUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> NoteResponse:
    """Update title and/or content of one of the caller's notes."""
    note = _get_owned_note(db, note_id, user.id)
    if body.title is not None:
        note.title = body.title
    if body.content is not None:
        note.content = body.content
    _commit(db)
    db.refresh(note)
    return NoteResponse(message="Note updated successfully", note=NoteOut.model_validate(note))


@router.delete("/{note_id}", response_model=MessageResponse)
def delete_note(
    note_id: NoteId,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Delete one of the caller's notes."""
    note = _get_owned_note(db, note_id, user.id)
    db.delete(note)
    _commit(db)
    logger.info("Note deleted", extra={"note_id": note_id, "user_id": user.id})
    return MessageResponse(message="Note deleted successfully")
