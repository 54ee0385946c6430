"""
Notebook Backend — Profile Service
===================================

What:  The edit-profile action: validate the form, check it against the
       database, then update the user or hand back field errors.
Who:   POST /settings/profile.

Action Flow:
    ┌────────────┐   ┌──────────────────┐   ┌──────────────┐   ┌──────────┐
    │ parse form │──▶│ DB refinements   │──▶│ intent check │──▶│ update + │
    │ (pydantic) │   │ username / email │   │ idle / error │   │ redirect │
    └────────────┘   │ password pairing │   └──────────────┘   └──────────┘
                     └──────────────────┘

    Refinements only run when the base schema accepted the form; a form
    that is already malformed is not worth three database round trips.

Password fields never leave the server: they are dropped from the echoed
payload always, and from the echoed value on validate-only round trips.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notebook.exceptions import DatabaseError, NotFoundError
from notebook.models.user import Password, User
from notebook.schemas.submission import ActionResult, Submission, parse_submission
from notebook.schemas.user import ProfileForm
from notebook.services.auth_service import auth_service

logger = logging.getLogger(__name__)

# snake_case spellings are not form fields but are still never echoed
PASSWORD_FIELDS = ("currentPassword", "newPassword", "current_password", "new_password")


class ProfileService:
    """
    Business logic for the edit-profile page.

    Error Handling Strategy:
        Validation problems become submission errors (400 from the route).
        Database failures are logged and wrapped in DatabaseError (500).
    """

    async def edit_profile(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        form: dict,
    ) -> ActionResult:
        """
        Handles one edit-profile submission.

        Args:
            db: Async database session (injected by FastAPI)
            user_id: The authenticated user being edited
            form: Submitted form fields

        Returns:
            ActionResult: idle for validate-only intents, error when any
            field failed, success with a redirect to /users/<username>.
        """
        submission, data = parse_submission(form, ProfileForm)
        if data is not None:
            await self._check_against_database(db, user_id, data, submission)

        submission.drop_fields(*PASSWORD_FIELDS, from_value=False)

        if not submission.is_submit:
            submission.drop_fields(*PASSWORD_FIELDS, from_payload=False)
            return ActionResult(status="idle", submission=submission)

        if data is None or submission.value is None:
            return ActionResult(status="error", submission=submission)

        username = await self._update_profile(db, user_id, data)
        return ActionResult(
            status="success",
            submission=submission,
            redirect_to=f"/users/{username}",
        )

    async def _check_against_database(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: ProfileForm,
        submission: Submission,
    ) -> None:
        try:
            existing_username = await self._find_user_id(db, User.username == data.username)
            if existing_username is not None and existing_username != user_id:
                submission.add_error("username", "A user already exists with this username")

            existing_email = await self._find_user_id(db, User.email == data.email)
            if existing_email is not None and existing_email != user_id:
                submission.add_error("email", "A user already exists with this email")

            if data.current_password and data.new_password:
                if not await auth_service.verify_user_password(
                    db, user_id, data.current_password
                ):
                    submission.add_error("currentPassword", "Incorrect password.")
        except SQLAlchemyError as e:
            logger.error("Database error validating profile %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})

        if data.new_password and not data.current_password:
            submission.add_error(
                "newPassword", "Must provide current password to change password."
            )

    async def _find_user_id(self, db: AsyncSession, condition) -> uuid.UUID | None:
        result = await db.execute(select(User.id).where(condition))
        return result.scalar_one_or_none()

    async def _update_profile(
        self, db: AsyncSession, user_id: uuid.UUID, data: ProfileForm
    ) -> str:
        """
        Writes the validated profile and returns the (possibly new) username.

        A blank name leaves the stored name untouched.
        """
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        if data.name is not None:
            user.name = data.name
        user.username = data.username
        user.email = data.email

        try:
            if data.new_password:
                new_hash = await auth_service.hash_password(data.new_password)
                password = await db.get(Password, user_id)
                if password is None:
                    db.add(Password(user_id=user_id, hash=new_hash))
                else:
                    password.hash = new_hash
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating profile %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not save your profile. Please try again.",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            )

        logger.info(
            "Profile %s updated (password changed: %s)", user_id, bool(data.new_password)
        )
        return user.username


profile_service = ProfileService()
