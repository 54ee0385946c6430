"""
Notebook Backend — Route Dependencies and Response Helpers
===========================================================

What:  FastAPI dependencies shared by route modules (who is asking, the
       posted form) and the translation of an ActionResult into a response.
"""

import uuid
from typing import Dict, Optional

from fastapi import Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notebook.config import settings
from notebook.database import get_db_session
from notebook.schemas.submission import ActionResponse, ActionResult
from notebook.services.auth_service import auth_service


async def require_user_id(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> uuid.UUID:
    """Authenticated user id, or a redirect to /login?redirectTo=<path>."""
    return await auth_service.require_user_id(db, request)


async def get_optional_user_id(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[uuid.UUID]:
    return await auth_service.get_user_id(db, request.cookies.get(settings.session_cookie_name))


async def read_form(request: Request) -> Dict[str, str]:
    """Posted form fields (urlencoded or multipart) as plain strings; files are ignored."""
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def action_response(result: ActionResult) -> Response:
    """
    success → 302 to result.redirect_to
    idle    → 200 {"status": "idle", "submission": ...}
    error   → 400 {"status": "error", "submission": ...}
    """
    if result.status == "success" and result.redirect_to:
        return RedirectResponse(result.redirect_to, status_code=302)

    body = ActionResponse(
        status="idle" if result.status == "idle" else "error",
        submission=result.submission,
    )
    return JSONResponse(
        status_code=200 if result.status == "idle" else 400,
        content=body.model_dump(mode="json"),
    )


def set_session_cookie(response: Response, token: str, max_age: Optional[int] = None) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
