#!/usr/bin/env python3
"""Tests for bearer token creation and verification."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import time

import jwt
import pytest

from docfill.auth import AuthService, extract_bearer_token
from docfill.exceptions import ConfigurationError, UnauthorizedError

SECRET = "auth-service-test-secret"


class TestAuthService:
    """JWT creation and verification"""

    def test_round_trip_identifies_principal(self, auth_service):
        token = auth_service.create_token("alice", expires_in_seconds=60)
        info = auth_service.verify_token(token)

        assert info.principal_id == "alice"
        assert info.token_id
        assert (info.expires_at - info.issued_at).total_seconds() == 60

    def test_empty_secret_rejected(self):
        with pytest.raises(ConfigurationError):
            AuthService(secret_key="")

    def test_empty_principal_rejected(self, auth_service):
        with pytest.raises(ValueError):
            auth_service.create_token("")

    def test_expired_token(self, auth_service):
        token = auth_service.create_token("alice", expires_in_seconds=-5)
        with pytest.raises(UnauthorizedError) as exc_info:
            auth_service.verify_token(token)
        assert exc_info.value.message == "Token has expired"

    def test_token_signed_with_other_secret(self, auth_service):
        other = AuthService(secret_key="a-different-secret-for-testing-purposes-only")
        with pytest.raises(UnauthorizedError):
            auth_service.verify_token(other.create_token("alice"))

    def test_token_without_subject(self):
        now = int(time.time())
        token = jwt.encode({"iss": "docfill", "iat": now, "exp": now + 60}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            AuthService(secret_key=SECRET).verify_token(token)

    def test_empty_token(self, auth_service):
        with pytest.raises(UnauthorizedError) as exc_info:
            auth_service.verify_token("")
        assert exc_info.value.code == "UNAUTHORIZED"

    def test_garbage_token(self, auth_service):
        with pytest.raises(UnauthorizedError):
            auth_service.verify_token("not.a.token")


class TestBearerExtraction:
    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Bearer abc", "abc"),
            ("bearer   abc  ", "abc"),
            ("Basic abc", None),
            ("Bearer", None),
            ("Bearer   ", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract(self, header, expected):
        assert extract_bearer_token(header) == expected
