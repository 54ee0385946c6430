"""
Notebook Backend — Authentication Service
==========================================

What:  Password hashing, login sessions and the "who is asking" lookup.
How:   bcrypt hashes via passlib; a `sessions` row per login; the cookie
       carries a signed JWT (python-jose) whose `sid` claim is the row id.
Who:   Login/logout routes, the require_user_id dependency, and the
       profile service (current password check, new password hash).

Session Resolution:
    cookie ──▶ JWT signature + exp ──▶ sessions row (not expired) ──▶ user_id

    Any break in that chain means "not logged in". Routes that need a user
    turn that into a redirect to /login?redirectTo=<current path>.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from notebook.config import settings
from notebook.exceptions import AuthenticationRequiredError, DatabaseError
from notebook.models.user import Password, Session, User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def safe_redirect(to: Optional[str], default: str = "/") -> str:
    """Only same-site absolute paths are allowed as redirect targets."""
    if not to or not to.startswith("/") or to.startswith("//"):
        return default
    return to


def login_redirect_url(request: Request) -> str:
    redirect_to = request.url.path
    if request.url.query:
        redirect_to = f"{redirect_to}?{request.url.query}"
    return "/login?" + urlencode({"redirectTo": redirect_to})


class AuthService:
    """
    Stateless authentication operations.

    Every method receives the request's AsyncSession; nothing is cached
    between requests.
    """

    # ── Tokens ────────────────────────────────────────────────────────────

    def create_session_token(self, session: Session) -> str:
        claims = {
            "sid": str(session.id),
            "exp": session.expiration_date,
        }
        return jwt.encode(claims, settings.session_secret, algorithm=settings.jwt_algorithm)

    def read_session_token(self, token: Optional[str]) -> Optional[uuid.UUID]:
        """Returns the session id from a cookie value, or None if it does not verify."""
        if not token:
            return None
        try:
            claims = jwt.decode(token, settings.session_secret, algorithms=[settings.jwt_algorithm])
            return uuid.UUID(claims["sid"])
        except (JWTError, KeyError, ValueError) as e:
            logger.debug("Rejected session token: %s", str(e))
            return None

    # ── Passwords ─────────────────────────────────────────────────────────

    async def hash_password(self, password: str) -> str:
        # bcrypt is deliberately slow; keep it off the event loop
        return await run_in_threadpool(get_password_hash, password)

    async def verify_user_password(
        self, db: AsyncSession, user_id: uuid.UUID, password: str
    ) -> bool:
        """True when the user has a stored hash and `password` matches it."""
        result = await db.execute(select(Password.hash).where(Password.user_id == user_id))
        stored_hash = result.scalar_one_or_none()
        if stored_hash is None:
            return False
        return await run_in_threadpool(verify_password, password, stored_hash)

    # ── Sessions ──────────────────────────────────────────────────────────

    async def login(
        self, db: AsyncSession, username: str, password: str
    ) -> Optional[Session]:
        """
        Verifies credentials and opens a session.

        Returns None for an unknown username or a wrong password; the caller
        reports both the same way so usernames cannot be probed.
        """
        result = await db.execute(
            select(User.id, Password.hash)
            .join(Password, Password.user_id == User.id)
            .where(User.username == username)
        )
        row = result.one_or_none()
        if row is None:
            return None
        user_id, stored_hash = row
        if not await run_in_threadpool(verify_password, password, stored_hash):
            return None
        return await self.create_session(db, user_id)

    async def create_session(self, db: AsyncSession, user_id: uuid.UUID) -> Session:
        session = Session(
            user_id=user_id,
            expiration_date=datetime.now(timezone.utc)
            + timedelta(days=settings.session_expiration_days),
        )
        try:
            db.add(session)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Could not create session for user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})
        logger.info("Session %s created for user %s", session.id, user_id)
        return session

    async def destroy_session(self, db: AsyncSession, token: Optional[str]) -> None:
        session_id = self.read_session_token(token)
        if session_id is None:
            return
        await db.execute(delete(Session).where(Session.id == session_id))
        logger.info("Session %s destroyed", session_id)

    async def get_user_id(self, db: AsyncSession, token: Optional[str]) -> Optional[uuid.UUID]:
        """Resolves a cookie value to a user id through an unexpired session."""
        session_id = self.read_session_token(token)
        if session_id is None:
            return None
        result = await db.execute(
            select(Session.user_id).where(
                Session.id == session_id,
                Session.expiration_date > datetime.now(timezone.utc),
            )
        )
        return result.scalar_one_or_none()

    async def require_user_id(self, db: AsyncSession, request: Request) -> uuid.UUID:
        """
        Returns the requesting user's id or raises a redirect to the login page.

        A cookie that no longer resolves is cleared on the way out.
        """
        token = request.cookies.get(settings.session_cookie_name)
        user_id = await self.get_user_id(db, token)
        if user_id is None:
            raise AuthenticationRequiredError(
                redirect_to=login_redirect_url(request),
                clear_session=token is not None,
            )
        return user_id

    async def logout(
        self, db: AsyncSession, request: Request, redirect_to: str = "/"
    ) -> AuthenticationRequiredError:
        """
        Destroys the request's session and returns the redirect to raise.

        Usage:
            raise await auth_service.logout(db, request)
        """
        await self.destroy_session(db, request.cookies.get(settings.session_cookie_name))
        # must survive the rollback that follows the raised redirect
        await db.commit()
        return AuthenticationRequiredError(redirect_to=redirect_to, clear_session=True)


auth_service = AuthService()
