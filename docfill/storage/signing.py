"""Signed retrieval URLs.

A retrieval URL carries a short-lived HS256 JWT naming exactly one object.
"""

import secrets
import time
from typing import Optional
from urllib.parse import quote

import jwt

from docfill.exceptions import SecurityError

ALGORITHM = "HS256"
AUDIENCE = "docfill-object"


class UrlSigner:
    """Creates and verifies retrieval tokens for ``bucket/key`` pairs."""

    def __init__(self, base_url: str, secret: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        # Without a configured secret links only survive this process
        self._secret = secret or secrets.token_urlsafe(32)

    def sign(self, bucket: str, key: str, expires_in: int) -> str:
        now = int(time.time())
        return jwt.encode(
            {"bkt": bucket, "key": key, "iat": now, "exp": now + expires_in, "aud": AUDIENCE},
            self._secret,
            algorithm=ALGORITHM,
        )

    def url_for(self, bucket: str, key: str, expires_in: int) -> str:
        token = self.sign(bucket, key, expires_in)
        return f"{self.base_url}/files/{quote(bucket)}/{quote(key)}?token={token}"

    def verify(self, bucket: str, key: str, token: str) -> None:
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM], audience=AUDIENCE)
        except jwt.ExpiredSignatureError:
            raise SecurityError(code="URL_EXPIRED", message="Retrieval link has expired")
        except jwt.InvalidTokenError as e:
            raise SecurityError(code="URL_INVALID", message=f"Invalid retrieval link: {e}")

        if claims.get("bkt") != bucket or claims.get("key") != key:
            raise SecurityError(code="URL_INVALID", message="Retrieval link does not match object")
