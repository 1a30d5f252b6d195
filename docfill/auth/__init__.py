"""Authentication for docfill."""

from docfill.auth.service import AuthService, TokenInfo, extract_bearer_token

__all__ = ["AuthService", "TokenInfo", "extract_bearer_token"]
