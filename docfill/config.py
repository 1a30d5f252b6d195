"""Configuration for docfill.

All locations derive from a single data directory so tests can redirect
everything into a temporary tree with ``Config.set_test_mode``.
"""

import os
from pathlib import Path
from typing import Optional

ENV_PREFIX = "DOCFILL"

DEFAULT_WEB_PORT = 8020
DEFAULT_SIGNED_URL_TTL_SECONDS = 3600
DEFAULT_MAX_TEMPLATE_MB = 50
DEFAULT_LOG_LEVEL = "INFO"

TEMPLATES_BUCKET = "document-templates"
GENERATED_BUCKET = "generated-documents"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}_{name}", default)


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Config:
    """Environment-backed configuration with a test-mode override."""

    _test_data_dir: Optional[Path] = None

    @classmethod
    def get_data_dir(cls) -> Path:
        if cls._test_data_dir is not None:
            return cls._test_data_dir
        return Path(_env("DATA_DIR", "data") or "data")

    @classmethod
    def get_storage_dir(cls) -> Path:
        override = _env("STORAGE_DIR")
        if override and cls._test_data_dir is None:
            return Path(override)
        return cls.get_data_dir() / "storage"

    @classmethod
    def get_metadata_dir(cls) -> Path:
        return cls.get_data_dir() / "metadata"

    @classmethod
    def get_web_port(cls) -> int:
        return _env_int("WEB_PORT", DEFAULT_WEB_PORT)

    @classmethod
    def get_web_server_url(cls) -> str:
        default = f"http://localhost:{cls.get_web_port()}"
        return (_env("WEB_SERVER_URL", default) or default).rstrip("/")

    @classmethod
    def get_jwt_secret(cls) -> Optional[str]:
        return _env("JWT_SECRET")

    @classmethod
    def get_signed_url_ttl(cls) -> int:
        return _env_int("SIGNED_URL_TTL", DEFAULT_SIGNED_URL_TTL_SECONDS)

    @classmethod
    def get_max_template_bytes(cls) -> int:
        return _env_int("MAX_TEMPLATE_MB", DEFAULT_MAX_TEMPLATE_MB) * 1024 * 1024

    @classmethod
    def get_log_level(cls) -> str:
        return (_env("LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()

    @classmethod
    def set_test_mode(cls, data_dir: Path) -> None:
        """Redirect all data locations into ``data_dir``."""
        cls._test_data_dir = Path(data_dir)

    @classmethod
    def clear_test_mode(cls) -> None:
        cls._test_data_dir = None

    @classmethod
    def is_test_mode(cls) -> bool:
        return cls._test_data_dir is not None


def get_default_storage_dir() -> str:
    return str(Config.get_storage_dir())


def get_default_metadata_dir() -> str:
    return str(Config.get_metadata_dir())
