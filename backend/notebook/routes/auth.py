"""
Notebook Backend — Login and Logout Route Handlers
===================================================

What:  GET/POST /login and POST /logout.
How:   Login verifies the password, opens a session row and sets the session
       cookie; logout deletes the row and expires the cookie.

Cookie lifetime:
    With `remember` checked the cookie lives as long as the session row
    (SESSION_EXPIRATION_DAYS). Without it the cookie is a browser-session
    cookie, while the row still expires server-side.
"""

import logging
import uuid
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notebook.config import settings
from notebook.database import get_db_session
from notebook.routes.deps import (
    action_response,
    clear_session_cookie,
    get_optional_user_id,
    read_form,
    set_session_cookie,
)
from notebook.schemas.submission import FORM_ERROR, ActionResponse, ActionResult, parse_submission
from notebook.schemas.user import LoginForm
from notebook.services.auth_service import auth_service, safe_redirect

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.get("/login", summary="Login loader")
async def login_loader(
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
) -> Response:
    """Already logged in → 302 /. Otherwise the login form has nothing to load."""
    if user_id is not None:
        return RedirectResponse("/", status_code=302)
    return JSONResponse({})


@router.post(
    "/login",
    responses={
        200: {"description": "Validate-only round trip", "model": ActionResponse},
        302: {"description": "Logged in; redirects to redirectTo or /"},
        400: {"description": "Field errors or bad credentials", "model": ActionResponse},
    },
    summary="Login action",
)
async def login_action(
    form: Dict[str, str] = Depends(read_form),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    submission, data = parse_submission(form, LoginForm)
    submission.drop_fields("password", from_payload=True, from_value=True)

    if not submission.is_submit:
        return action_response(ActionResult(status="idle", submission=submission))
    if data is None:
        return action_response(ActionResult(status="error", submission=submission))

    session = await auth_service.login(db, data.username, data.password)
    if session is None:
        logger.info("Failed login for username %s", data.username)
        submission.add_error(FORM_ERROR, "Invalid username or password")
        return action_response(ActionResult(status="error", submission=submission))

    response = RedirectResponse(safe_redirect(data.redirect_to), status_code=302)
    max_age = settings.session_expiration_days * 24 * 60 * 60 if data.remember else None
    set_session_cookie(response, auth_service.create_session_token(session), max_age=max_age)
    return response


@router.post(
    "/logout",
    responses={302: {"description": "Logged out; redirects to /"}},
    summary="Logout action",
)
async def logout_action(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await auth_service.destroy_session(db, request.cookies.get(settings.session_cookie_name))
    response = RedirectResponse("/", status_code=302)
    clear_session_cookie(response)
    return response
