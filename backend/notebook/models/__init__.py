"""ORM models. Importing this package registers every table with Base.metadata."""

from notebook.models.user import Password, Session, User, UserImage
from notebook.models.note import Note

__all__ = ["User", "Password", "UserImage", "Session", "Note"]
