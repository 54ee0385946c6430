"""
Notebook Backend — Note SQLAlchemy Model
=========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Query Patterns:
    - Owner's notes, most recently edited first:
      SELECT ... WHERE owner_id = :id ORDER BY updated_at DESC
      → Uses idx_notes_owner_updated
    - Single note for an owner: SELECT ... WHERE id = :id AND owner_id = :owner
      → Primary key lookup
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notebook.database import Base
from notebook.models.user import User, utcnow

TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 10000


class Note(Base):
    """A titled note owned by exactly one user. Deleted with its owner."""

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    owner: Mapped[User] = relationship(back_populates="notes")

    __table_args__ = (
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_owner_updated", "owner_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner_id={self.owner_id}, title='{self.title}')>"
