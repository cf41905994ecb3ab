"""
Conduit Backend — Security Unit Tests
=======================================

What:  Password hashing and JWT issue/verify.

What we test:
    ✅ Hashes verify against the original password only
    ✅ Malformed stored hashes are rejected, not raised
    ✅ Tokens carry id, username, email and an expiry
    ✅ Tampered, foreign-secret and expired tokens decode to None
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from jose import jwt

from conduit.config import settings
from conduit.security import decode_token, hash_password, issue_token, verify_password


def _user(**overrides):
    fields = {"id": 7, "username": "jake", "email": "jake@jake.jake"}
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("jakejake")
        assert hashed != "jakejake"
        assert hashed.startswith("$2")

    def test_verify_accepts_correct_password(self):
        hashed = hash_password("jakejake")
        assert verify_password("jakejake", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("jakejake")
        assert verify_password("jakejak3", hashed) is False

    def test_verify_rejects_malformed_hash(self):
        assert verify_password("jakejake", "not-a-bcrypt-hash") is False


class TestTokens:

    def test_issued_token_carries_identity_claims(self):
        claims = decode_token(issue_token(_user()))
        assert claims["id"] == 7
        assert claims["username"] == "jake"
        assert claims["email"] == "jake@jake.jake"

    def test_expiry_follows_configured_lifetime(self):
        before = datetime.now(timezone.utc)
        claims = decode_token(issue_token(_user()))
        expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        expected = before + timedelta(seconds=settings.jwt_expires_in)
        assert abs((expires - expected).total_seconds()) < 5

    def test_token_signed_with_other_secret_is_rejected(self):
        token = jwt.encode({"id": 7}, "some-other-secret", algorithm="HS256")
        assert decode_token(token) is None

    def test_expired_token_is_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(seconds=10)
        token = jwt.encode(
            {"id": 7, "exp": past}, settings.jwt_secret, algorithm=settings.jwt_algorithm
        )
        assert decode_token(token) is None

    def test_garbage_is_rejected(self):
        assert decode_token("not.a.token") is None
        assert decode_token("") is None
