"""
Notebook Backend — Note Editor Form and Note Responses
=======================================================

What:  The form shared by the new-note and edit-note actions, plus the
       response models of the note loaders.

The editor form carries an optional `id`: blank means "create", a UUID
means "update that note", provided the requester owns it.
"""

import uuid
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field
from pydantic_core import PydanticCustomError

from notebook.models.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH


def _max_length(label: str, limit: int):
    def check(value: str) -> str:
        if len(value) > limit:
            raise PydanticCustomError(
                "too_long", f"{label} must be at most {limit} characters"
            )
        return value
    return check


Title = Annotated[str, Field(min_length=1), AfterValidator(_max_length("Title", TITLE_MAX_LENGTH))]
Content = Annotated[
    str, Field(min_length=1), AfterValidator(_max_length("Content", CONTENT_MAX_LENGTH))
]


class NoteEditorForm(BaseModel):
    id: Optional[uuid.UUID] = None
    title: Title
    content: Content


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteOwner(BaseModel):
    username: str
    name: Optional[str] = None
    image_url: str


class NoteEditorData(BaseModel):
    id: uuid.UUID
    title: str
    content: str


class NoteEditorLoaderResponse(BaseModel):
    """Loader data for the editor. `note` is null on the new-note page."""
    note: Optional[NoteEditorData] = None


class NoteDetail(BaseModel):
    id: uuid.UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NoteDetailResponse(BaseModel):
    note: NoteDetail
    owner: NoteOwner
    is_owner: bool = Field(description="Whether the requesting user owns this note")


class NoteListItem(BaseModel):
    id: uuid.UUID
    title: str

    model_config = {"from_attributes": True}


class OwnerNotesResponse(BaseModel):
    owner: NoteOwner
    notes: List[NoteListItem]
