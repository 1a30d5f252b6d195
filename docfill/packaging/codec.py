"""Template body codec.

Templates arrive either as plain text bodies or as Office Open XML
packages (zip archives). The substitution engine only ever sees decoded
text: for packages each textual XML part is extracted, filled and written
back, and every other member is copied byte for byte.
"""

import io
import re
import zipfile
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
from xml.sax.saxutils import escape

from pydantic import BaseModel, Field

from docfill.exceptions import UnsupportedTemplateError
from docfill.logger import Logger
from docfill.substitution import SubstitutionEngine, count_placeholders, find_placeholder_names
from docfill.validation.models import DocumentFormat
from docfill.validation.validator import render_value

ZIP_MAGIC = b"PK\x03\x04"
TEXT_ENCODING = "utf-8"

_TEXT_PARTS = re.compile(
    r"^(?:word/(?:document|header\d*|footer\d*|footnotes|endnotes)\.xml"
    r"|xl/sharedStrings\.xml"
    r"|xl/worksheets/sheet\d+\.xml)$"
)


class ContainerKind(str, Enum):
    TEXT = "text"
    OOXML = "ooxml"


class FillResult(BaseModel):
    """Filled bytes plus what happened along the way."""

    data: bytes
    container: ContainerKind
    replacements: Dict[str, int] = Field(default_factory=dict)
    leftover_placeholders: int = 0
    parts: List[str] = Field(default_factory=list)


def detect_container(data: bytes) -> ContainerKind:
    return ContainerKind.OOXML if data.startswith(ZIP_MAGIC) else ContainerKind.TEXT


def decode_text(data: bytes) -> str:
    # surrogateescape keeps undecodable bytes so encode_text restores them exactly
    return data.decode(TEXT_ENCODING, errors="surrogateescape")


def encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, errors="surrogateescape")


def is_text_part(member_name: str) -> bool:
    return bool(_TEXT_PARTS.match(member_name))


def _merge(into: Dict[str, int], counts: Mapping[str, int]) -> None:
    for name, count in counts.items():
        into[name] = into.get(name, 0) + count


def _open_package(data: bytes) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise UnsupportedTemplateError(f"Template is not a readable Office package: {e}")


def iter_text_parts(data: bytes) -> Iterator[Tuple[str, str]]:
    """Yield ``(member_name, decoded_text)`` for every textual part of a package."""
    with _open_package(data) as package:
        for info in package.infolist():
            if is_text_part(info.filename):
                yield info.filename, decode_text(package.read(info))


class DocumentFiller:
    """Fills a template body for one document family."""

    def __init__(self, document_format: DocumentFormat, logger: Optional[Logger] = None):
        self.document_format = document_format
        self.engine = SubstitutionEngine.for_format(document_format, logger=logger)
        self.logger = logger

    def fill(self, data: bytes, values: Mapping[str, Any]) -> FillResult:
        container = detect_container(data)
        if container == ContainerKind.OOXML:
            return self._fill_package(data, values)
        return self._fill_text(data, values)

    def _fill_text(self, data: bytes, values: Mapping[str, Any]) -> FillResult:
        result = self.engine.apply(decode_text(data), values)
        return FillResult(
            data=encode_text(result.text),
            container=ContainerKind.TEXT,
            replacements=result.replacements,
            leftover_placeholders=count_placeholders(result.text),
        )

    def _fill_package(self, data: bytes, values: Mapping[str, Any]) -> FillResult:
        # XML parts need markup characters in values escaped
        escaped = {name: escape(render_value(value)) for name, value in values.items()}
        replacements: Dict[str, int] = {}
        leftover = 0
        parts: List[str] = []

        output = io.BytesIO()
        try:
            with _open_package(data) as source, zipfile.ZipFile(output, "w") as target:
                for info in source.infolist():
                    payload = source.read(info)
                    if is_text_part(info.filename):
                        result = self.engine.apply(decode_text(payload), escaped)
                        payload = encode_text(result.text)
                        _merge(replacements, result.replacements)
                        leftover += count_placeholders(result.text)
                        parts.append(info.filename)
                    member = zipfile.ZipInfo(info.filename, date_time=info.date_time)
                    member.external_attr = info.external_attr
                    target.writestr(member, payload, compress_type=info.compress_type)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, KeyError) as e:
            raise UnsupportedTemplateError(f"Template package could not be rewritten: {e}")

        if not parts and self.logger:
            self.logger.warning("Package has no textual parts", format=self.document_format.value)

        return FillResult(
            data=output.getvalue(),
            container=ContainerKind.OOXML,
            replacements=replacements,
            leftover_placeholders=leftover,
            parts=parts,
        )


def placeholder_names(data: bytes) -> List[str]:
    """Well-formed placeholder names found in a template body."""
    if detect_container(data) == ContainerKind.TEXT:
        return find_placeholder_names(decode_text(data))
    names: List[str] = []
    for _, text in iter_text_parts(data):
        for name in find_placeholder_names(text):
            if name not in names:
                names.append(name)
    return names
