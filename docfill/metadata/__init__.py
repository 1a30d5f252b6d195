"""Metadata store package."""
from docfill.metadata.base import MetadataStoreBase
from docfill.metadata.file_store import JsonMetadataStore

__all__ = ["MetadataStoreBase", "JsonMetadataStore"]
