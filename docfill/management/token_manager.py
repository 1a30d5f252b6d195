#!/usr/bin/env python3
"""JWT Token Management CLI

Command-line utility to create and verify bearer tokens for docfill.
Tokens are signed with DOCFILL_JWT_SECRET (or --jwt-secret).
"""

import argparse
import sys
from datetime import datetime, timezone

from docfill.auth import AuthService
from docfill.auth.service import DEFAULT_TOKEN_EXPIRY_SECONDS
from docfill.config import Config
from docfill.exceptions import DocfillError
from docfill.logger import Logger, session_logger


def _build_auth_service(args) -> AuthService:
    return AuthService(secret_key=args.jwt_secret or Config.get_jwt_secret() or "")


def describe_expiry(seconds: int) -> str:
    """Human-readable form of an expiry in seconds, e.g. ``1 day, 2 hours``."""
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60

    parts = []
    if days > 0:
        parts.append(f"{days} day{'s' if days != 1 else ''}")
    if hours > 0:
        parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
    if minutes > 0:
        parts.append(f"{minutes} minute{'s' if minutes != 1 else ''}")
    if not parts:
        parts.append(f"{seconds} second{'s' if seconds != 1 else ''}")
    return ", ".join(parts)


def create_token(args) -> int:
    """Create a new JWT token"""
    logger: Logger = session_logger

    try:
        auth_service = _build_auth_service(args)
        token = auth_service.create_token(args.principal, expires_in_seconds=args.expires)
    except (DocfillError, ValueError) as e:
        logger.error(f"Error creating token: {str(e)}")
        return 1

    logger.info("JWT Token Created Successfully")
    logger.info(f"Principal:  {args.principal}")
    logger.info(f"Expires:    {describe_expiry(args.expires)} ({args.expires} seconds)")
    logger.info("Token:")
    logger.info(token)
    logger.info("Use it in the 'Authorization: Bearer <token>' header.")
    return 0


def verify_token(args) -> int:
    """Verify a token"""
    logger: Logger = session_logger

    try:
        auth_service = _build_auth_service(args)
        token_info = auth_service.verify_token(args.token)
    except DocfillError as e:
        logger.error(f"Token validation failed: {e.message}")
        return 1

    logger.info("Token is valid")
    logger.info(f"Principal:  {token_info.principal_id}")
    logger.info(f"Issued:     {token_info.issued_at.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    logger.info(f"Expires:    {token_info.expires_at.strftime('%Y-%m-%d %H:%M:%S UTC')}")

    days_until_expiry = (token_info.expires_at - datetime.now(timezone.utc)).days
    if days_until_expiry < 7:
        logger.warning(f"Warning: Token expires in {days_until_expiry} days")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="docfill JWT Token Manager - Create and verify authentication tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create a token for principal 'alice' that expires in 30 days
  python -m docfill.management.token_manager create --principal alice --expires 2592000

  # Verify a token
  python -m docfill.management.token_manager verify --token eyJhbGc...

Environment Variables:
    DOCFILL_JWT_SECRET      Secret used to sign and verify tokens
        """,
    )
    parser.add_argument(
        "--jwt-secret",
        type=str,
        default=None,
        help="JWT secret key (default: from DOCFILL_JWT_SECRET env var)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", help="Create a new JWT token")
    create_parser.add_argument(
        "--principal", type=str, required=True, help="Principal id the token identifies"
    )
    create_parser.add_argument(
        "--expires",
        type=int,
        default=DEFAULT_TOKEN_EXPIRY_SECONDS,
        help="Number of seconds until token expires (default: 86400 = 1 day)",
    )

    verify_parser = subparsers.add_parser("verify", help="Verify a token")
    verify_parser.add_argument("--token", type=str, required=True, help="Token to verify")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "create":
        return create_token(args)
    return verify_token(args)


if __name__ == "__main__":
    sys.exit(main())
