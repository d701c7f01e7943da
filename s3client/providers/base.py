from abc import ABC, abstractmethod
from typing import Iterator, List

from ..models import ObjectInfo


class ObjectStore(ABC):
    """Abstract base class for S3-compatible object stores."""

    @abstractmethod
    def list_buckets(self) -> List[str]:
        """Return all bucket names, sorted."""
        pass

    @abstractmethod
    def bucket_exists(self, bucket: str) -> bool:
        pass

    @abstractmethod
    def make_bucket(self, bucket: str):
        pass

    @abstractmethod
    def remove_bucket(self, bucket: str):
        """Remove an empty bucket."""
        pass

    @abstractmethod
    def iter_objects(self, bucket: str, prefix: str, recursive: bool = False) -> Iterator[ObjectInfo]:
        """Lazily list objects whose key starts with prefix.

        A shallow listing (``recursive=False``) also yields every common
        prefix one level below ``prefix`` as a zero-sized entry whose key ends
        in "/". Callers that stop early must close the iterator.
        """
        pass

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> bytes:
        pass

    @abstractmethod
    def put_object(self, bucket: str, key: str, data: bytes = b''):
        pass

    @abstractmethod
    def copy_object(self, bucket: str, src_key: str, dst_key: str):
        pass

    @abstractmethod
    def remove_object(self, bucket: str, key: str):
        pass

    @abstractmethod
    def download_file(self, bucket: str, key: str, local_path: str):
        """Download an object to a local file path."""
        pass

    @abstractmethod
    def upload_file(self, local_path: str, bucket: str, key: str):
        """Upload a local file to a specific object key."""
        pass
