"""
Unit tests for password hashing and session tokens.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.config import settings
from app.core.security import (
    ALGORITHM,
    create_access_token,
    decode_access_token,
    dummy_password_hash,
    get_password_hash,
    verify_password,
)


class TestPasswordHashing:
    """bcrypt hash and verify."""

    def test_hash_then_verify(self):
        hashed = get_password_hash("admin123")

        assert hashed != "admin123"
        assert hashed.startswith("$2")
        assert verify_password("admin123", hashed) is True

    def test_wrong_password_fails(self):
        hashed = get_password_hash("admin123")

        assert verify_password("admin124", hashed) is False

    def test_hash_is_salted(self):
        """Same password hashes differently each time; both verify."""
        first = get_password_hash("admin123")
        second = get_password_hash("admin123")

        assert first != second
        assert verify_password("admin123", first)
        assert verify_password("admin123", second)

    def test_cost_factor_comes_from_settings(self):
        hashed = get_password_hash("admin123")

        assert hashed.split("$")[2] == f"{settings.bcrypt_rounds:02d}"

    @pytest.mark.parametrize("bad_hash", ["not-a-bcrypt-hash", "$2b$04$short", ""])
    def test_malformed_hash_returns_false(self, bad_hash):
        assert verify_password("admin123", bad_hash) is False

    def test_empty_password_returns_false(self):
        assert verify_password("", get_password_hash("admin123")) is False

    def test_long_passwords_compare_on_first_72_bytes(self):
        base = "x" * 72
        hashed = get_password_hash(base + "tail-one")

        assert verify_password(base + "tail-two", hashed) is True

    def test_dummy_hash_is_cached(self):
        assert dummy_password_hash() is dummy_password_hash()
        assert verify_password("anything", dummy_password_hash()) is False


class TestSessionTokens:
    """JWT issue and validation."""

    def test_round_trip(self):
        token = create_access_token("admin-id-1", "admin")

        data = decode_access_token(token)

        assert data is not None
        assert data.admin_id == "admin-id-1"
        assert data.username == "admin"

    def test_default_lifetime_is_seven_days(self):
        token = create_access_token("admin-id-1", "admin")

        data = decode_access_token(token)

        lifetime = data.expires_at - data.issued_at
        assert lifetime == timedelta(days=7)

    def test_expired_token_is_rejected(self):
        token = create_access_token(
            "admin-id-1", "admin", expires_delta=timedelta(seconds=-1)
        )

        assert decode_access_token(token) is None

    def test_wrong_secret_is_rejected(self):
        now = datetime.now(timezone.utc)
        forged = jwt.encode(
            {"sub": "admin-id-1", "username": "admin", "exp": now + timedelta(hours=1)},
            "another_secret_key_that_is_also_long_enough",
            algorithm=ALGORITHM,
        )

        assert decode_access_token(forged) is None

    def test_tampered_payload_is_rejected(self):
        header, payload, signature = create_access_token("admin-id-1", "admin").split(".")
        other_payload = create_access_token("admin-id-2", "root").split(".")[1]

        assert decode_access_token(f"{header}.{other_payload}.{signature}") is None

    def test_missing_claims_are_rejected(self):
        now = datetime.now(timezone.utc)
        no_username = jwt.encode(
            {"sub": "admin-id-1", "exp": now + timedelta(hours=1)},
            settings.secret_key,
            algorithm=ALGORITHM,
        )
        no_exp = jwt.encode(
            {"sub": "admin-id-1", "username": "admin"},
            settings.secret_key,
            algorithm=ALGORITHM,
        )

        assert decode_access_token(no_username) is None
        assert decode_access_token(no_exp) is None

    @pytest.mark.parametrize("garbage", [None, "", "not.a.jwt", "abc"])
    def test_garbage_is_rejected(self, garbage):
        assert decode_access_token(garbage) is None
