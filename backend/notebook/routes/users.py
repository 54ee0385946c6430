"""
Notebook Backend — User Route Handlers
=======================================

What:  Public profile page and the profile image resource route.
"""

import logging
import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from notebook.database import get_db_session
from notebook.schemas.common import ErrorResponse
from notebook.schemas.user import PublicUserResponse
from notebook.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


@router.get(
    "/users/{username}",
    response_model=PublicUserResponse,
    responses={404: {"description": "Unknown user", "model": ErrorResponse}},
    summary="Public user profile",
)
async def user_loader(
    username: str,
    db: AsyncSession = Depends(get_db_session),
) -> PublicUserResponse:
    return await user_service.get_public_user(db, username)


@router.get(
    "/resources/user-images/{image_id}",
    responses={
        200: {"description": "Image bytes"},
        404: {"description": "Image not found", "model": ErrorResponse},
    },
    summary="Serve a profile image",
)
async def user_image(
    image_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    Image ids change whenever a photo is replaced, so the bytes behind a
    given URL never change and can be cached for a year.
    """
    image = await user_service.get_user_image(db, image_id)
    return Response(
        content=image.blob,
        media_type=image.content_type,
        headers={
            "Content-Length": str(len(image.blob)),
            "Cache-Control": "public, max-age=31536000, immutable",
        },
    )
