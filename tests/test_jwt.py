"""
Tests for token creation and verification.
"""

import json
from base64 import urlsafe_b64decode

import pytest

from auth.jwt import (
    TokenExpired,
    TokenInvalidSignature,
    TokenMalformed,
    create_token,
    decode_token,
    verify_token,
)

SECRET = "s3cret"


def _payload(token: str) -> dict:
    seg = token.split(".")[1]
    return json.loads(urlsafe_b64decode(seg + "=" * (-len(seg) % 4)))


class TestCreateToken:
    def test_round_trip_returns_user_id(self):
        token = create_token(42, SECRET)
        assert verify_token(token, SECRET) == 42

    def test_no_expiry_by_default(self):
        payload = _payload(create_token(7, SECRET))
        assert payload["userId"] == 7
        assert "exp" not in payload

    def test_expiry_claim_when_configured(self):
        payload = _payload(create_token(7, SECRET, expires_in=60))
        assert payload["exp"] == payload["iat"] + 60

    def test_compact_jwt_shape(self):
        assert create_token(1, SECRET).count(".") == 2


class TestVerifyToken:
    def test_wrong_secret(self):
        token = create_token(1, SECRET)
        with pytest.raises(TokenInvalidSignature):
            verify_token(token, "other-secret")

    def test_tampered_payload(self):
        header, _, sig = create_token(1, SECRET).split(".")
        forged_payload = create_token(2, SECRET).split(".")[1]
        with pytest.raises(TokenInvalidSignature):
            verify_token(f"{header}.{forged_payload}.{sig}", SECRET)

    def test_tampered_signature_with_non_ascii(self):
        token = create_token(1, SECRET)
        with pytest.raises(TokenInvalidSignature):
            verify_token(token[:-1] + "é", SECRET)

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a..c", "a.b.c.d"])
    def test_malformed(self, token):
        with pytest.raises(TokenMalformed):
            verify_token(token, SECRET)

    def test_expired(self):
        token = create_token(1, SECRET, expires_in=-10)
        with pytest.raises(TokenExpired):
            decode_token(token, SECRET)
