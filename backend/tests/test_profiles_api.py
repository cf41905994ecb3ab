"""
Conduit Backend — Profile & Follow API Tests
==============================================

What we test:
    ✅ Profiles are public; `following` reflects the caller
    ✅ Follow/unfollow are idempotent and leave no stray rows
    ✅ Self-follow is rejected with a username error
    ✅ Unknown usernames are 404
"""

import pytest
from sqlalchemy import func, select

from conduit.models.follow import Follow


async def _follow_rows(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(Follow))


class TestProfiles:

    @pytest.mark.asyncio
    async def test_anonymous_profile(self, test_client, register):
        await register("jake")

        response = await test_client.get("/api/profiles/jake")

        assert response.status_code == 200
        assert response.json() == {
            "profile": {"username": "jake", "bio": "", "image": "", "following": False}
        }

    @pytest.mark.asyncio
    async def test_unknown_profile(self, test_client):
        response = await test_client.get("/api/profiles/nobody")
        assert response.status_code == 404
        assert response.json() == {"errors": {"message": "User not found"}}

    @pytest.mark.asyncio
    async def test_invalid_token_on_public_route_is_ignored(self, test_client, register, auth_headers):
        await register("jake")
        response = await test_client.get("/api/profiles/jake", headers=auth_headers("garbage"))
        assert response.status_code == 200
        assert response.json()["profile"]["following"] is False


class TestFollow:

    @pytest.mark.asyncio
    async def test_follow_then_profile_shows_following(self, test_client, register, auth_headers):
        await register("jake")
        jane = await register("jane")
        headers = auth_headers(jane["token"])

        followed = await test_client.post("/api/profiles/jake/follow", headers=headers)
        profile = await test_client.get("/api/profiles/jake", headers=headers)

        assert followed.status_code == 200
        assert followed.json()["profile"]["following"] is True
        assert profile.json()["profile"]["following"] is True

    @pytest.mark.asyncio
    async def test_follow_is_idempotent(self, test_client, register, auth_headers, session_factory):
        await register("jake")
        jane = await register("jane")
        headers = auth_headers(jane["token"])

        await test_client.post("/api/profiles/jake/follow", headers=headers)
        second = await test_client.post("/api/profiles/jake/follow", headers=headers)

        assert second.status_code == 200
        assert await _follow_rows(session_factory) == 1

    @pytest.mark.asyncio
    async def test_unfollow_twice_leaves_no_rows(self, test_client, register, auth_headers, session_factory):
        await register("jake")
        jane = await register("jane")
        headers = auth_headers(jane["token"])

        await test_client.post("/api/profiles/jake/follow", headers=headers)
        first = await test_client.delete("/api/profiles/jake/follow", headers=headers)
        second = await test_client.delete("/api/profiles/jake/follow", headers=headers)

        assert first.status_code == second.status_code == 200
        assert second.json()["profile"]["following"] is False
        assert await _follow_rows(session_factory) == 0

    @pytest.mark.asyncio
    async def test_cannot_follow_yourself(self, test_client, register, auth_headers):
        jake = await register("jake")

        response = await test_client.post(
            "/api/profiles/jake/follow", headers=auth_headers(jake["token"])
        )

        assert response.status_code == 422
        assert response.json() == {"errors": {"username": ["You can't follow yourself"]}}

    @pytest.mark.asyncio
    async def test_follow_unknown_user(self, test_client, register, auth_headers):
        jane = await register("jane")
        response = await test_client.post(
            "/api/profiles/nobody/follow", headers=auth_headers(jane["token"])
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_follow_requires_auth(self, test_client, register):
        await register("jake")
        response = await test_client.post("/api/profiles/jake/follow")
        assert response.status_code == 401
