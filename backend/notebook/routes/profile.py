"""
Notebook Backend — Edit Profile Route Handlers
===============================================

What:  GET /settings/profile (loader) and POST /settings/profile (action).
Who:   The settings page's edit-profile form.

Request Flow (action):
    1. require_user_id: no session → 302 /login?redirectTo=/settings/profile
    2. Form fields are read as plain strings
    3. ProfileService validates, checks uniqueness, verifies the password
    4. 302 /users/<username> on success; otherwise the submission is echoed
       back (200 idle for validate-only intents, 400 with field errors)
"""

import logging
import uuid
from typing import Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from notebook.database import get_db_session
from notebook.schemas.common import ErrorResponse
from notebook.schemas.submission import ActionResponse
from notebook.schemas.user import ProfileLoaderResponse
from notebook.routes.deps import action_response, read_form, require_user_id
from notebook.services.auth_service import auth_service
from notebook.services.profile_service import profile_service
from notebook.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Profile"])


@router.get(
    "/profile",
    response_model=ProfileLoaderResponse,
    responses={
        302: {"description": "Not logged in, or the session's user no longer exists"},
    },
    summary="Edit profile loader",
    description="Returns the current user's name, username, email and profile image.",
)
async def profile_loader(
    request: Request,
    user_id: uuid.UUID = Depends(require_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileLoaderResponse:
    """
    Loads the form defaults for the edit-profile page.

    A session whose user has since been deleted is logged out and sent home.
    """
    user = await user_service.get_profile(db, user_id)
    if user is None:
        logger.warning("Session points at missing user %s; logging out", user_id)
        raise await auth_service.logout(db, request, redirect_to="/")
    return ProfileLoaderResponse(user=user)


@router.post(
    "/profile",
    responses={
        200: {"description": "Validate-only round trip", "model": ActionResponse},
        302: {"description": "Saved; redirects to the user's page"},
        400: {"description": "Field errors", "model": ActionResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Edit profile action",
    description=(
        "Updates name, username and email, and optionally the password. "
        "Username and email must not belong to another user; changing the "
        "password requires the current one."
    ),
)
async def profile_action(
    user_id: uuid.UUID = Depends(require_user_id),
    form: Dict[str, str] = Depends(read_form),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    result = await profile_service.edit_profile(db, user_id, form)
    return action_response(result)
