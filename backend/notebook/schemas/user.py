"""
Notebook Backend — User Validation and Schemas
===============================================

What:  Reusable field types for user forms, the profile and login form
       schemas, and the response models returned by user-facing loaders.

Field rules (applied after blank fields are dropped):
    username   3-20 chars, letters/numbers/underscores, stored lowercase
    password   6-100 chars
    name       3-40 chars
    email      valid address, 3-100 chars, stored lowercase
"""

import re
import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic_core import PydanticCustomError

USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9_]+")
EMAIL_PATTERN = re.compile(
    r"(?!\.)(?!.*\.\.)([A-Z0-9_'+\-.]*)[A-Z0-9_+-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}",
    re.IGNORECASE,
)


def _check_length(value: str, label: str, min_length: int, max_length: int) -> None:
    if len(value) < min_length:
        raise PydanticCustomError("too_short", f"{label} is too short")
    if len(value) > max_length:
        raise PydanticCustomError("too_long", f"{label} is too long")


def validate_username(value: str) -> str:
    _check_length(value, "Username", 3, 20)
    if not USERNAME_PATTERN.fullmatch(value):
        raise PydanticCustomError(
            "username_pattern",
            "Username can only include letters, numbers, and underscores",
        )
    return value.lower()


def validate_password(value: str) -> str:
    _check_length(value, "Password", 6, 100)
    return value


def validate_name(value: str) -> str:
    _check_length(value, "Name", 3, 40)
    return value


def validate_email(value: str) -> str:
    if not EMAIL_PATTERN.fullmatch(value):
        raise PydanticCustomError("email_invalid", "Email is invalid")
    _check_length(value, "Email", 3, 100)
    return value.lower()


Username = Annotated[str, AfterValidator(validate_username)]
Password = Annotated[str, AfterValidator(validate_password)]
Name = Annotated[str, AfterValidator(validate_name)]
Email = Annotated[str, AfterValidator(validate_email)]


# ══════════════════════════════════════════════════════════════════════════
# Form Schemas
# ══════════════════════════════════════════════════════════════════════════


class ProfileForm(BaseModel):
    """
    Edit-profile form. Both password fields are optional; the pairing rule
    (new password needs the current one) is checked by the profile service
    together with the database lookups.
    """

    name: Optional[Name] = None
    username: Username
    email: Email
    current_password: Optional[Password] = Field(default=None, alias="currentPassword")
    new_password: Optional[Password] = Field(default=None, alias="newPassword")


class LoginForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: Username
    password: Password
    redirect_to: Optional[str] = Field(default=None, alias="redirectTo")
    remember: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ImageRef(BaseModel):
    id: uuid.UUID


class ProfileUser(BaseModel):
    """What the edit-profile form is pre-filled with."""
    id: uuid.UUID
    name: Optional[str] = None
    username: str
    email: str
    image: Optional[ImageRef] = None
    image_url: str = Field(description="Profile photo URL, or the default avatar")


class ProfileLoaderResponse(BaseModel):
    user: ProfileUser


class PublicUser(BaseModel):
    id: uuid.UUID
    name: Optional[str] = None
    username: str
    image_url: str
    created_at: datetime
    note_count: int = Field(description="Number of notes this user owns")


class PublicUserResponse(BaseModel):
    user: PublicUser
