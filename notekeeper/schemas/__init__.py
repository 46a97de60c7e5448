"""Pydantic request/response schemas."""

from notekeeper.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LockedResponse,
    LoginRequest,
    SignupRequest,
    UserPublic,
)
from notekeeper.schemas.health import HealthResponse
from notekeeper.schemas.notes import (
    MessageResponse,
    NoteCreate,
    NoteOut,
    NoteResponse,
    NotesListResponse,
    NoteUpdate,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LockedResponse",
    "LoginRequest",
    "MessageResponse",
    "NoteCreate",
    "NoteOut",
    "NoteResponse",
    "NotesListResponse",
    "NoteUpdate",
    "SignupRequest",
    "UserPublic",
]
