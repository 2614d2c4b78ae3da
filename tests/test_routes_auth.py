"""Tests for /api/auth and /api/doctors routes."""

from quickslot.core.security import create_access_token, create_refresh_token
from tests.conftest import complete_profile, register_and_login


class TestRegisterRoute:
    async def test_register(self, client):
        resp = await client.post(
            "/api/auth/register",
            json={"email": "a@example.com", "password": "secret123", "username": "dr-a"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["username"] == "dr-a"
        assert body["profile_completed"] is False
        assert body["booking_link"].endswith("/dr-a")

    async def test_duplicate_username_409(self, client):
        await register_and_login(client, username="dr-a", email="a@example.com")
        resp = await client.post(
            "/api/auth/register",
            json={"email": "b@example.com", "password": "secret123", "username": "dr-a"},
        )
        assert resp.status_code == 409
        assert resp.json()["detail"] == "username_taken"

    async def test_duplicate_email_409(self, client):
        await register_and_login(client, username="dr-a", email="a@example.com")
        resp = await client.post(
            "/api/auth/register",
            json={"email": "A@example.com", "password": "secret123", "username": "dr-b"},
        )
        assert resp.status_code == 409
        assert resp.json()["detail"] == "email_already_exists"

    async def test_invalid_username_422(self, client):
        resp = await client.post(
            "/api/auth/register",
            json={"email": "a@example.com", "password": "secret123", "username": "Dr_A"},
        )
        assert resp.status_code == 422

    async def test_non_string_email_422(self, client):
        resp = await client.post(
            "/api/auth/register",
            json={"email": 123, "password": "secret123", "username": "dr-a"},
        )
        assert resp.status_code == 422
        resp = await client.post("/api/auth/login", json={"email": ["a"], "password": "secret123"})
        assert resp.status_code == 422

    async def test_username_available(self, client):
        resp = await client.get("/api/auth/username-available", params={"username": "dr-a"})
        assert resp.json() == {"username": "dr-a", "available": True}
        await register_and_login(client, username="dr-a", email="a@example.com")
        resp = await client.get("/api/auth/username-available", params={"username": "dr-a"})
        assert resp.json()["available"] is False


class TestLoginRoutes:
    async def test_login_and_me(self, client):
        headers = await register_and_login(client)
        resp = await client.get("/api/auth/me", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["email"] == "smith@example.com"

    async def test_bad_password_401(self, client):
        await register_and_login(client)
        resp = await client.post(
            "/api/auth/login", json={"email": "smith@example.com", "password": "wrong-pass"}
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "invalid_credentials"

    async def test_token_form(self, client):
        await register_and_login(client)
        resp = await client.post(
            "/api/auth/token",
            data={"username": "smith@example.com", "password": "secret123"},
        )
        assert resp.status_code == 200
        assert resp.json()["token_type"] == "bearer"

    async def test_refresh(self, client):
        await register_and_login(client)
        login = await client.post(
            "/api/auth/login", json={"email": "smith@example.com", "password": "secret123"}
        )
        refresh = login.json()["refresh_token"]
        resp = await client.post("/api/auth/refresh", json={"refresh_token": refresh})
        assert resp.status_code == 200
        headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
        assert (await client.get("/api/auth/me", headers=headers)).status_code == 200

    async def test_refresh_reports_completed_profile(self, client):
        headers = await register_and_login(client)
        await complete_profile(client, headers)
        login = await client.post(
            "/api/auth/login", json={"email": "smith@example.com", "password": "secret123"}
        )
        assert login.json()["profile_completed"] is True

        resp = await client.post(
            "/api/auth/refresh", json={"refresh_token": login.json()["refresh_token"]}
        )
        assert resp.status_code == 200
        assert resp.json()["profile_completed"] is True

    async def test_refresh_rejects_inactive_user(self, client, sessionmaker):
        from sqlalchemy import update

        from quickslot.modules.accounts.models import User

        await register_and_login(client)
        login = await client.post(
            "/api/auth/login", json={"email": "smith@example.com", "password": "secret123"}
        )
        async with sessionmaker() as s:
            await s.execute(
                update(User).where(User.email == "smith@example.com").values(is_active=False)
            )
            await s.commit()

        resp = await client.post(
            "/api/auth/refresh", json={"refresh_token": login.json()["refresh_token"]}
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "user_not_found"

    async def test_refresh_token_is_not_an_access_token(self, client):
        await register_and_login(client)
        login = await client.post(
            "/api/auth/login", json={"email": "smith@example.com", "password": "secret123"}
        )
        headers = {"Authorization": f"Bearer {login.json()['refresh_token']}"}
        resp = await client.get("/api/auth/me", headers=headers)
        assert resp.status_code == 401
        assert resp.json()["detail"] == "invalid_token_type"

    async def test_missing_token_401(self, client):
        assert (await client.get("/api/doctors/me")).status_code == 401

    async def test_garbage_token_401(self, client):
        resp = await client.get("/api/doctors/me", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "invalid_token"

    async def test_non_uuid_subject_401(self, client):
        access = create_access_token(subject="dr-smith")
        resp = await client.get(
            "/api/doctors/me", headers={"Authorization": f"Bearer {access}"}
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "invalid_token"

        refresh = create_refresh_token(subject="dr-smith")
        resp = await client.post("/api/auth/refresh", json={"refresh_token": refresh})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "invalid_token"


class TestProfileRoutes:
    async def test_update_completes_profile(self, client, auth_headers):
        body = await complete_profile(client, auth_headers)
        assert body["profile_completed"] is True
        assert body["full_name"] == "Dr. Jane Smith"

        resp = await client.get("/api/doctors/me", headers=auth_headers)
        assert resp.json()["profile_completed"] is True

    async def test_update_requires_fields(self, client, auth_headers):
        resp = await client.put(
            "/api/doctors/me",
            json={"full_name": "D", "specialty": "GP", "phone": "123"},
            headers=auth_headers,
        )
        assert resp.status_code == 422


class TestHealth:
    async def test_health(self, client):
        assert (await client.get("/api/health")).json() == {"status": "ok"}

    async def test_health_db(self, client):
        resp = await client.get("/api/health/db")
        assert resp.status_code == 200
        assert resp.json()["database"] == "sqlite"
