"""
Notebook Backend — Auth, User and Health Route Tests
=====================================================

What:  Login/logout, public user pages, profile images and /health.
How:   HTTPX AsyncClient over ASGITransport against in-memory SQLite.
"""

from uuid import uuid4

import pytest
from sqlalchemy import select

from notebook.config import settings
from notebook.models.user import Session, UserImage
from tests.conftest import DEFAULT_PASSWORD


class TestLogin:

    @pytest.mark.asyncio
    async def test_loader_when_logged_out(self, test_client):
        response = await test_client.get("/login")

        assert response.status_code == 200
        assert response.json() == {}

    @pytest.mark.asyncio
    async def test_loader_when_logged_in(self, test_client, user, login):
        await login(user)

        response = await test_client.get("/login")

        assert response.status_code == 302
        assert response.headers["location"] == "/"

    @pytest.mark.asyncio
    async def test_login_redirects_to_target(self, test_client, user, session_factory):
        response = await test_client.post(
            "/login",
            data={
                "username": "kody",
                "password": DEFAULT_PASSWORD,
                "redirectTo": "/settings/profile",
            },
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/settings/profile"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.session_cookie_name}=")
        assert "HttpOnly" in set_cookie
        assert "Max-Age" not in set_cookie
        async with session_factory() as db:
            result = await db.execute(select(Session).where(Session.user_id == user.id))
            assert result.scalar_one_or_none() is not None

    @pytest.mark.asyncio
    async def test_remember_me_sets_max_age(self, test_client, user):
        response = await test_client.post(
            "/login",
            data={"username": "kody", "password": DEFAULT_PASSWORD, "remember": "on"},
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/"
        max_age = settings.session_expiration_days * 24 * 60 * 60
        assert f"Max-Age={max_age}" in response.headers["set-cookie"]

    @pytest.mark.asyncio
    async def test_offsite_redirect_is_ignored(self, test_client, user):
        response = await test_client.post(
            "/login",
            data={
                "username": "kody",
                "password": DEFAULT_PASSWORD,
                "redirectTo": "https://evil.example.com",
            },
        )

        assert response.headers["location"] == "/"

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, user):
        response = await test_client.post(
            "/login", data={"username": "kody", "password": "not-my-password"}
        )

        assert response.status_code == 400
        submission = response.json()["submission"]
        assert submission["error"] == {"": ["Invalid username or password"]}
        assert "password" not in submission["payload"]
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_client):
        response = await test_client.post(
            "/login", data={"username": "nobody", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 400
        assert response.json()["submission"]["error"] == {"": ["Invalid username or password"]}


class TestLogout:

    @pytest.mark.asyncio
    async def test_logout_destroys_session(self, test_client, user, login, session_factory):
        await login(user)

        response = await test_client.post("/logout")

        assert response.status_code == 302
        assert response.headers["location"] == "/"
        assert "Max-Age=0" in response.headers["set-cookie"]
        async with session_factory() as db:
            result = await db.execute(select(Session).where(Session.user_id == user.id))
            assert result.first() is None


class TestUsers:

    @pytest.mark.asyncio
    async def test_public_profile(self, test_client, user):
        response = await test_client.get("/users/Kody")

        assert response.status_code == 200
        data = response.json()["user"]
        assert data["username"] == "kody"
        assert data["note_count"] == 0
        assert data["image_url"] == "/img/user.png"

    @pytest.mark.asyncio
    async def test_user_image(self, test_client, user, db_session):
        image = UserImage(user_id=user.id, content_type="image/png", blob=b"\x89PNG")
        db_session.add(image)
        await db_session.commit()

        response = await test_client.get(f"/resources/user-images/{image.id}")

        assert response.status_code == 200
        assert response.content == b"\x89PNG"
        assert response.headers["content-type"] == "image/png"
        assert "immutable" in response.headers["cache-control"]

    @pytest.mark.asyncio
    async def test_missing_user_image(self, test_client):
        response = await test_client.get(f"/resources/user-images/{uuid4()}")

        assert response.status_code == 404


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert "x-request-id" in response.headers
