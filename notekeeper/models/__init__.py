"""SQLAlchemy ORM models."""

from notekeeper.models.base import Base
from notekeeper.models.note import Note
from notekeeper.models.user import User

__all__ = ["Base", "Note", "User"]
