import argparse
import sys

import uvicorn

from docfill.auth import AuthService
from docfill.config import Config
from docfill.config_docs import get_config_summary, validate_configuration
from docfill.logger import Logger, session_logger
from docfill.web_server import DocfillWebServer

logger: Logger = session_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="docfill Web Server - Office template filling REST API"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host address to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=Config.get_web_port(),
        help="Port number to listen on (default: 8020, or DOCFILL_WEB_PORT env var)",
    )
    parser.add_argument(
        "--jwt-secret",
        type=str,
        default=None,
        help="JWT secret key (default: from DOCFILL_JWT_SECRET env var)",
    )
    parser.add_argument(
        "--no-auth",
        action="store_true",
        help="Disable authentication (WARNING: insecure, for development only)",
    )
    return parser


def main() -> int:
    args = build_parser().parse_args()
    require_auth = not args.no_auth
    jwt_secret = args.jwt_secret or Config.get_jwt_secret()

    is_valid, errors = validate_configuration(require_auth=require_auth and not args.jwt_secret)
    if not is_valid:
        for error in errors:
            logger.error("FATAL: Invalid configuration", error=error)
        return 1
    logger.debug("Configuration loaded", **get_config_summary())

    auth_service = None
    if require_auth:
        auth_service = AuthService(secret_key=jwt_secret or "", logger=logger)
        logger.info("Authentication service initialized", jwt_enabled=True)
    else:
        logger.warning("Auth disabled: running in no-auth mode (insecure)")

    server = DocfillWebServer(require_auth=require_auth, auth_service=auth_service)

    try:
        logger.info(
            "Starting web server",
            host=args.host,
            port=args.port,
            transport="HTTP REST API",
            jwt_enabled=require_auth,
        )
        uvicorn.run(server.app, host=args.host, port=args.port)
        logger.info("Web server shutdown complete")
    except KeyboardInterrupt:
        logger.info("Web server stopped by user")
    except Exception as e:
        logger.error("Failed to start web server", error=str(e), error_type=type(e).__name__)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
