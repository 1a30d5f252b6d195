"""Template body codec: plain text bodies and Office Open XML packages."""

from docfill.packaging.codec import (
    ContainerKind,
    DocumentFiller,
    FillResult,
    decode_text,
    detect_container,
    encode_text,
    is_text_part,
    placeholder_names,
)

__all__ = [
    "ContainerKind",
    "DocumentFiller",
    "FillResult",
    "decode_text",
    "detect_container",
    "encode_text",
    "is_text_part",
    "placeholder_names",
]
