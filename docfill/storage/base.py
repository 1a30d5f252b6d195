"""Base interface for the object store collaborator.

Objects live in named buckets under slash-separated keys. Every method is a
suspension point for the generation pipeline, so the interface is async.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple


class ObjectStoreBase(ABC):
    """Abstract base class for object store implementations"""

    @abstractmethod
    async def put_object(
        self, bucket: str, key: str, data: bytes, content_type: str, upsert: bool = True
    ) -> str:
        """
        Store bytes under a key

        Args:
            bucket: Bucket name
            key: Object key, e.g. ``{principal}/{id}.docx``
            data: Raw bytes
            content_type: MIME type recorded with the object
            upsert: Overwrite an existing object instead of failing

        Returns:
            The key the object was stored under

        Raises:
            StorageWriteError: If the write fails or the key exists and upsert is False
        """
        pass

    @abstractmethod
    async def get_object(self, bucket: str, key: str) -> bytes:
        """
        Retrieve object bytes

        Raises:
            ObjectNotFoundError: If nothing is stored under the key
            StorageReadError: If the read fails
        """
        pass

    @abstractmethod
    async def delete_object(self, bucket: str, key: str) -> bool:
        """
        Delete an object

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def exists(self, bucket: str, key: str) -> bool:
        pass

    @abstractmethod
    async def list_objects(self, bucket: str, prefix: str = "") -> List[str]:
        """List keys in a bucket, optionally restricted to a prefix"""
        pass

    @abstractmethod
    async def create_signed_url(self, bucket: str, key: str, expires_in: int) -> str:
        """
        Create a time-limited retrieval URL for an object

        Raises:
            ObjectNotFoundError: If nothing is stored under the key
        """
        pass

    @abstractmethod
    async def open_signed(self, bucket: str, key: str, token: str) -> Tuple[bytes, str]:
        """
        Resolve a retrieval URL's token to the object bytes and content type

        Raises:
            SecurityError: If the token is invalid, expired or for another object
            ObjectNotFoundError: If the object is gone
        """
        pass
