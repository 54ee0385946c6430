"""
Notebook Backend — User Service
================================

What:  Read-side user lookups: the edit-profile loader data, public profiles,
       note owners, and profile images.
Who:   Profile, user and note routes; the note service (owner lookups).
"""

import logging
import uuid
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notebook.exceptions import DatabaseError, NotFoundError
from notebook.models.note import Note
from notebook.models.user import User, UserImage
from notebook.schemas.note import NoteOwner
from notebook.schemas.user import ImageRef, ProfileUser, PublicUser, PublicUserResponse

logger = logging.getLogger(__name__)

DEFAULT_USER_IMAGE = "/img/user.png"


def get_user_img_src(image_id: Optional[uuid.UUID]) -> str:
    if image_id is None:
        return DEFAULT_USER_IMAGE
    return f"/resources/user-images/{image_id}"


class UserService:

    async def get_profile(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[ProfileUser]:
        """
        Loads what the edit-profile form is pre-filled with.

        Returns None when the user is gone; the caller logs the session out.
        """
        try:
            result = await db.execute(
                select(User, UserImage.id)
                .outerjoin(UserImage, UserImage.user_id == User.id)
                .where(User.id == user_id)
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading profile %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})

        if row is None:
            return None
        user, image_id = row
        return ProfileUser(
            id=user.id,
            name=user.name,
            username=user.username,
            email=user.email,
            image=ImageRef(id=image_id) if image_id else None,
            image_url=get_user_img_src(image_id),
        )

    async def find_owner(
        self, db: AsyncSession, username: str
    ) -> Tuple[User, NoteOwner]:
        """
        Resolves a username from the URL to its user.

        Raises:
            NotFoundError: No user has that username (→ 404)
        """
        try:
            result = await db.execute(
                select(User, UserImage.id)
                .outerjoin(UserImage, UserImage.user_id == User.id)
                .where(User.username == username.lower())
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading user %s: %s", username, str(e))
            raise DatabaseError(context={"username": username})

        if row is None:
            raise NotFoundError(resource="user", resource_id=username)
        user, image_id = row
        owner = NoteOwner(
            username=user.username,
            name=user.name,
            image_url=get_user_img_src(image_id),
        )
        return user, owner

    async def get_public_user(self, db: AsyncSession, username: str) -> PublicUserResponse:
        user, owner = await self.find_owner(db, username)
        result = await db.execute(
            select(func.count(Note.id)).where(Note.owner_id == user.id)
        )
        return PublicUserResponse(
            user=PublicUser(
                id=user.id,
                name=user.name,
                username=user.username,
                image_url=owner.image_url,
                created_at=user.created_at,
                note_count=result.scalar() or 0,
            )
        )

    async def get_user_image(self, db: AsyncSession, image_id: uuid.UUID) -> UserImage:
        image = await db.get(UserImage, image_id)
        if image is None:
            raise NotFoundError(resource="image", resource_id=str(image_id))
        return image


user_service = UserService()
