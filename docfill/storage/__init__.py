"""Object store module

Abstract collaborator interface plus a file-backed implementation with
signed retrieval URLs.
"""

from docfill.storage.base import ObjectStoreBase
from docfill.storage.file_storage import FileObjectStore
from docfill.storage.signing import UrlSigner

__all__ = [
    "ObjectStoreBase",
    "FileObjectStore",
    "UrlSigner",
]
