"""Pytest configuration and fixtures

Provides shared fixtures for all tests: a temporary data directory per test,
file-backed collaborators rooted in it, the template manager, the
generation pipeline, auth setup and small Office package builders.
"""

import io
import sys
import zipfile
from pathlib import Path

import pytest

# Add project root to sys.path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from docfill.auth import AuthService
from docfill.config import Config
from docfill.generation import DocumentPipeline
from docfill.logger import ConsoleLogger
from docfill.metadata import JsonMetadataStore
from docfill.storage import FileObjectStore, UrlSigner
from docfill.templates import TemplateManager
from docfill.validation.models import ParameterType, TemplateParameter

# ============================================================================
# AUTH AND TOKEN CONFIGURATION
# ============================================================================

# Shared JWT secret for tokens and signed retrieval URLs in tests
TEST_JWT_SECRET = "test-secret-key-for-secure-testing-do-not-use-in-production"
TEST_BASE_URL = "http://testserver"
TEST_PRINCIPAL = "user-123"


@pytest.fixture(scope="function", autouse=True)
def test_data_dir(tmp_path):
    """
    Automatically provide a temporary data directory for each test

    This fixture:
    - Creates a unique temporary directory for each test
    - Configures docfill.config to use this directory
    - Restores normal configuration after the test completes
    """
    test_dir = tmp_path / "docfill_test_data"
    test_dir.mkdir(parents=True, exist_ok=True)
    (test_dir / "storage").mkdir(exist_ok=True)
    (test_dir / "metadata").mkdir(exist_ok=True)

    Config.set_test_mode(test_dir)

    yield test_dir

    Config.clear_test_mode()


@pytest.fixture
def logger():
    return ConsoleLogger(name="docfill.test", level="DEBUG")


@pytest.fixture
def signer():
    return UrlSigner(TEST_BASE_URL, TEST_JWT_SECRET)


@pytest.fixture
def object_store(test_data_dir, signer, logger):
    return FileObjectStore(signer=signer, storage_dir=str(test_data_dir / "storage"), logger=logger)


@pytest.fixture
def metadata_store(test_data_dir, logger):
    return JsonMetadataStore(base_dir=str(test_data_dir / "metadata"), logger=logger)


@pytest.fixture
def template_manager(object_store, metadata_store, logger):
    return TemplateManager(object_store=object_store, metadata_store=metadata_store, logger=logger)


@pytest.fixture
def pipeline(object_store, metadata_store, logger):
    return DocumentPipeline(object_store=object_store, metadata_store=metadata_store, logger=logger)


@pytest.fixture
def auth_service(logger):
    """
    Create an AuthService for testing

    Returns:
        AuthService: Configured with TEST_JWT_SECRET
    """
    return AuthService(secret_key=TEST_JWT_SECRET, logger=logger)


@pytest.fixture
def test_jwt_token(auth_service):
    """Bearer token for TEST_PRINCIPAL."""
    return auth_service.create_token(TEST_PRINCIPAL, expires_in_seconds=3600)


# ============================================================================
# TEMPLATE CONTENT
# ============================================================================


@pytest.fixture
def claim_parameters():
    """Parameters matching the approval letter body used across tests."""
    return [
        TemplateParameter(name="company_name", label="Company name"),
        TemplateParameter(name="claim_id", label="Claim ID", type=ParameterType.NUMBER),
        TemplateParameter(
            name="contact_email", label="Contact email", type=ParameterType.EMAIL, required=False
        ),
    ]


WORD_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Override PartName="/word/document.xml" ContentType="application/'
    'vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)


def word_body(*paragraphs: str) -> str:
    runs = "".join(f"<w:p><w:r><w:t>{text}</w:t></w:r></w:p>" for text in paragraphs)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{runs}</w:body></w:document>"
    )


def build_package(parts: dict) -> bytes:
    """Zip ``{member_name: text_or_bytes}`` into an in-memory package."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as package:
        for name, payload in parts.items():
            package.writestr(name, payload)
    return buffer.getvalue()


def read_part(data: bytes, member: str) -> str:
    with zipfile.ZipFile(io.BytesIO(data)) as package:
        return package.read(member).decode("utf-8")


@pytest.fixture
def make_docx():
    """Builder for a minimal .docx with one paragraph per argument."""

    def _make(*paragraphs: str, extra_parts=None) -> bytes:
        parts = {
            "[Content_Types].xml": WORD_CONTENT_TYPES,
            "word/document.xml": word_body(*paragraphs),
        }
        parts.update(extra_parts or {})
        return build_package(parts)

    return _make


@pytest.fixture
def make_xlsx():
    """Builder for a minimal .xlsx whose shared strings are the arguments."""

    def _make(*strings: str) -> bytes:
        items = "".join(f"<si><t>{s}</t></si>" for s in strings)
        shared = (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<sst xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main" '
            f'count="{len(strings)}" uniqueCount="{len(strings)}">{items}</sst>'
        )
        return build_package(
            {
                "[Content_Types].xml": "<Types/>",
                "xl/sharedStrings.xml": shared,
                "xl/worksheets/sheet1.xml": "<worksheet><sheetData/></worksheet>",
                "xl/media/logo.png": b"\x89PNG\r\n\x1a\n{{company_name}}\x00\xff",
            }
        )

    return _make


@pytest.fixture
def package_part():
    """Reader for one member of a package, decoded as UTF-8."""
    return read_part
