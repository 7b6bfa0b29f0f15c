"""
Unit Tests for Security Module
Tests for: password hashing, session tokens
"""
import pytest
from datetime import datetime, timedelta
from jose import jwt

from mentor_portal.core.config import settings
from mentor_portal.core.exceptions import InvalidSessionError
from mentor_portal.core.security import (
    verify_password,
    get_password_hash,
    create_session_token,
    decode_session_token,
)


CLAIMS = {
    "userId": "3f1c2a7e-0000-4000-8000-000000000001",
    "staffId": "STF00A1B2",
    "email": "hod@college.edu",
    "role": "HOD+PROJECT_MENTOR",
    "department": "CSE",
    "section": None,
}


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Bcrypt generates a new salt per hash"""
        assert get_password_hash("samepassword") != get_password_hash("samepassword")

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_against_non_bcrypt_value(self):
        """A plain-text stored value never verifies"""
        assert verify_password("secret", "secret") is False

    def test_long_password_truncated_to_72_bytes(self):
        long_password = "a" * 100
        hashed = get_password_hash(long_password)

        assert verify_password("a" * 72, hashed) is True


class TestSessionTokens:
    """Test session token creation and decoding"""

    def test_round_trip_keeps_claims(self):
        token = create_session_token(CLAIMS)
        payload = decode_session_token(token)

        assert payload["staffId"] == "STF00A1B2"
        assert payload["role"] == "HOD+PROJECT_MENTOR"
        assert payload["type"] == "session"

    def test_default_expiry_is_session_lifetime(self):
        token = create_session_token(CLAIMS)
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        expected = datetime.utcnow() + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
        actual = datetime.utcfromtimestamp(payload["exp"])
        assert abs((expected - actual).total_seconds()) < 60

    def test_expired_token_rejected(self):
        token = create_session_token(CLAIMS, expires_delta=timedelta(seconds=-10))

        with pytest.raises(InvalidSessionError):
            decode_session_token(token)

    def test_token_signed_with_other_key_rejected(self):
        token = jwt.encode({**CLAIMS, "type": "session"}, "another-key", algorithm="HS256")

        with pytest.raises(InvalidSessionError):
            decode_session_token(token)

    def test_wrong_token_type_rejected(self):
        token = jwt.encode({**CLAIMS, "type": "refresh"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

        with pytest.raises(InvalidSessionError):
            decode_session_token(token)

    def test_missing_claim_rejected(self):
        claims = {k: v for k, v in CLAIMS.items() if k != "staffId"}
        token = create_session_token(claims)

        with pytest.raises(InvalidSessionError):
            decode_session_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidSessionError):
            decode_session_token("not-a-token")
