"""JWT identity provider.

Tokens identify a principal by the ``sub`` claim. The generation pipeline
treats that id as an opaque string.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from docfill.exceptions import ConfigurationError, UnauthorizedError
from docfill.logger import Logger, session_logger

ALGORITHM = "HS256"
ISSUER = "docfill"
DEFAULT_TOKEN_EXPIRY_SECONDS = 86400


class TokenInfo(BaseModel):
    """Verified token claims."""

    principal_id: str
    token_id: str
    issued_at: datetime
    expires_at: datetime


class AuthService:
    """Creates and verifies bearer tokens."""

    def __init__(self, secret_key: str, logger: Optional[Logger] = None):
        if not secret_key:
            raise ConfigurationError(
                code="JWT_SECRET_MISSING",
                message="A JWT secret is required when authentication is enabled",
            )
        self._secret_key = secret_key
        self.logger: Logger = logger or session_logger

    def create_token(
        self, principal_id: str, expires_in_seconds: int = DEFAULT_TOKEN_EXPIRY_SECONDS
    ) -> str:
        if not principal_id:
            raise ValueError("principal_id must be a non-empty string")
        now = int(time.time())
        claims = {
            "sub": principal_id,
            "jti": str(uuid.uuid4()),
            "iss": ISSUER,
            "iat": now,
            "exp": now + expires_in_seconds,
        }
        token = jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)
        self.logger.info("Token created", principal_id=principal_id, expires_in=expires_in_seconds)
        return token

    def verify_token(self, token: str) -> TokenInfo:
        """
        Verify a bearer token.

        Raises:
            UnauthorizedError: If the token is missing, malformed, expired or
                signed with another secret
        """
        if not token:
            raise UnauthorizedError("No authorization token provided")
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                issuer=ISSUER,
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            self.logger.warning("Token verification failed", reason="expired")
            raise UnauthorizedError("Token has expired")
        except jwt.InvalidTokenError as e:
            self.logger.warning("Token verification failed", reason="invalid", error=str(e))
            raise UnauthorizedError(f"Invalid token: {e}")

        return TokenInfo(
            principal_id=claims["sub"],
            token_id=claims.get("jti", ""),
            issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
