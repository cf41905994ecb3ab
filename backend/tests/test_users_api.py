"""
Conduit Backend — User & Auth API Tests
=========================================

What:  /api/users/register, /api/users/login, /api/user end to end.
How:   HTTPX AsyncClient over ASGITransport against an in-memory database.
"""

import pytest
from jose import jwt

from conduit.config import settings


class TestRegistration:

    @pytest.mark.asyncio
    async def test_register_returns_user_with_token(self, test_client):
        response = await test_client.post(
            "/api/users/register",
            json={"user": {"username": "jake", "email": "jake@jake.jake", "password": "jakejake"}},
        )

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["username"] == "jake"
        assert user["email"] == "jake@jake.jake"
        assert user["bio"] == ""
        assert user["image"] == ""
        assert user["token"]
        assert "password" not in user

    @pytest.mark.asyncio
    async def test_register_alias_route(self, test_client):
        response = await test_client.post(
            "/api/users",
            json={"user": {"username": "jake", "email": "jake@jake.jake", "password": "jakejake"}},
        )
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_duplicate_username_is_422_on_username(self, test_client, register):
        await register("jake", email="jake@jake.jake")

        response = await test_client.post(
            "/api/users/register",
            json={"user": {"username": "jake", "email": "other@jake.jake", "password": "jakejake"}},
        )

        assert response.status_code == 422
        assert response.json() == {"errors": {"username": ["has already been taken"]}}

    @pytest.mark.asyncio
    async def test_duplicate_email_is_422_on_email(self, test_client, register):
        await register("jake", email="jake@jake.jake")

        response = await test_client.post(
            "/api/users/register",
            json={"user": {"username": "jacob", "email": "jake@jake.jake", "password": "jakejake"}},
        )

        assert response.status_code == 422
        assert response.json() == {"errors": {"email": ["has already been taken"]}}

    @pytest.mark.asyncio
    async def test_invalid_fields_are_all_reported(self, test_client):
        response = await test_client.post(
            "/api/users/register",
            json={"user": {"username": "jo", "email": "nope", "password": ""}},
        )

        assert response.status_code == 422
        errors = response.json()["errors"]
        assert errors["username"] == ["Username must be between 3 and 20 characters"]
        assert errors["email"] == ["Invalid email format"]
        assert errors["password"] == [
            "Password cannot be empty",
            "Password must be at least 6 characters long",
        ]

    @pytest.mark.asyncio
    async def test_missing_wrapper_is_422(self, test_client):
        response = await test_client.post("/api/users/register", json={})
        assert response.status_code == 422
        assert "user" in response.json()["errors"]


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, register):
        await register("jake", email="jake@jake.jake", password="jakejake")

        response = await test_client.post(
            "/api/users/login",
            json={"user": {"email": "jake@jake.jake", "password": "jakejake"}},
        )

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "jake"
        assert response.json()["user"]["token"]

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_are_identical(self, test_client, register):
        await register("jake", email="jake@jake.jake", password="jakejake")

        wrong_password = await test_client.post(
            "/api/users/login",
            json={"user": {"email": "jake@jake.jake", "password": "wrongpassword"}},
        )
        unknown_email = await test_client.post(
            "/api/users/login",
            json={"user": {"email": "nobody@jake.jake", "password": "jakejake"}},
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {
            "errors": {"message": "Email or password is invalid"}
        }


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_get_current_user(self, test_client, register, auth_headers):
        jake = await register("jake")

        response = await test_client.get("/api/user", headers=auth_headers(jake["token"]))

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "jake"

    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.get("/api/user")
        assert response.status_code == 401
        assert response.json() == {"errors": {"message": "Authorization token is missing"}}

    @pytest.mark.asyncio
    async def test_bearer_scheme_is_not_accepted(self, test_client, register):
        jake = await register("jake")
        response = await test_client.get(
            "/api/user", headers={"Authorization": f"Bearer {jake['token']}"}
        )
        assert response.status_code == 401
        assert response.json()["errors"]["message"] == "Authorization token is missing"

    @pytest.mark.asyncio
    async def test_invalid_token(self, test_client, auth_headers):
        response = await test_client.get("/api/user", headers=auth_headers("garbage"))
        assert response.status_code == 401
        assert response.json() == {"errors": {"message": "Invalid or expired token"}}

    @pytest.mark.asyncio
    async def test_token_for_unknown_user(self, test_client, auth_headers):
        token = jwt.encode(
            {"id": 999, "username": "ghost", "email": "ghost@x.org"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        response = await test_client.get("/api/user", headers=auth_headers(token))
        assert response.status_code == 401
        assert response.json() == {"errors": {"message": "User not found"}}


class TestUpdateUser:

    @pytest.mark.asyncio
    async def test_update_bio_and_image(self, test_client, register, auth_headers):
        jake = await register("jake")

        response = await test_client.put(
            "/api/user",
            json={"user": {"bio": "I like to skateboard", "image": "https://i.stack.imgur.com/xHWG8.jpg"}},
            headers=auth_headers(jake["token"]),
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["bio"] == "I like to skateboard"
        assert user["image"] == "https://i.stack.imgur.com/xHWG8.jpg"

    @pytest.mark.asyncio
    async def test_update_password_then_login(self, test_client, register, auth_headers):
        jake = await register("jake", email="jake@jake.jake")

        await test_client.put(
            "/api/user",
            json={"user": {"password": "newpassword"}},
            headers=auth_headers(jake["token"]),
        )
        response = await test_client.post(
            "/api/users/login",
            json={"user": {"email": "jake@jake.jake", "password": "newpassword"}},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, test_client, register, auth_headers):
        await register("jane", email="jane@jane.jane")
        jake = await register("jake")

        response = await test_client.put(
            "/api/user",
            json={"user": {"email": "jane@jane.jane"}},
            headers=auth_headers(jake["token"]),
        )

        assert response.status_code == 422
        assert response.json() == {"errors": {"email": ["has already been taken"]}}

    @pytest.mark.asyncio
    async def test_invalid_image_url(self, test_client, register, auth_headers):
        jake = await register("jake")

        response = await test_client.put(
            "/api/user",
            json={"user": {"image": "not a url"}},
            headers=auth_headers(jake["token"]),
        )

        assert response.status_code == 422
        assert response.json() == {"errors": {"image": ["Image must be a valid URL"]}}
