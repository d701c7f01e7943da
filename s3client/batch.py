"""Recursive operations over every object below a prefix.

A batch stops at the first failing object. Objects handled before the
failure stay handled; the raised :class:`BatchError` carries the partial
result so the caller can report it.
"""
import os
from typing import Callable, Iterable, Iterator, Optional, Tuple

from .errors import BatchError, LocalFileError, S3ClientError
from .models import SEPARATOR, BatchResult, ObjectInfo
from .providers.base import ObjectStore

# transform(item) -> number of bytes affected
Transform = Callable[[object], int]
Progress = Callable[[str], None]


def list_recursive(store: ObjectStore, bucket: str, prefix: str) -> Iterator[ObjectInfo]:
    return store.iter_objects(bucket, prefix, recursive=True)


def item_key(item) -> str:
    if isinstance(item, ObjectInfo):
        return item.key
    if isinstance(item, tuple):
        return item[-1]
    return str(item)


def run_batch(items: Iterable, transform: Transform, progress: Optional[Progress] = None) -> BatchResult:
    result = BatchResult()
    for item in items:
        key = item_key(item)
        if progress:
            progress(key)
        try:
            size = transform(item)
        except OSError as e:
            error = LocalFileError(f"{e.strerror or e}: {e.filename or key}")
            result.error = error
            raise BatchError(key, error, result) from e
        except S3ClientError as e:
            result.error = e
            raise BatchError(key, e, result) from e
        result.add(key, size)
    return result


def apply_recursive(
    store: ObjectStore,
    bucket: str,
    prefix: str,
    transform: Transform,
    progress: Optional[Progress] = None,
) -> BatchResult:
    # snapshot first so objects written by the transform are never revisited
    objects = list(list_recursive(store, bucket, prefix))
    return run_batch(objects, transform, progress)


def relative_key(key: str, prefix: str) -> str:
    return key[len(prefix):] if key.startswith(prefix) else key


def delete_transform(store: ObjectStore, bucket: str) -> Transform:
    def transform(obj: ObjectInfo) -> int:
        store.remove_object(bucket, obj.key)
        return obj.size
    return transform


def copy_transform(store: ObjectStore, bucket: str, src_prefix: str, dst_prefix: str) -> Transform:
    def transform(obj: ObjectInfo) -> int:
        dst_key = dst_prefix + relative_key(obj.key, src_prefix)
        store.copy_object(bucket, obj.key, dst_key)
        return obj.size
    return transform


def move_transform(store: ObjectStore, bucket: str, src_prefix: str, dst_prefix: str) -> Transform:
    copy = copy_transform(store, bucket, src_prefix, dst_prefix)

    def transform(obj: ObjectInfo) -> int:
        size = copy(obj)
        # S3 has no rename: drop the source once its copy is in place
        store.remove_object(bucket, obj.key)
        return size
    return transform


def download_transform(store: ObjectStore, bucket: str, prefix: str, local_dir: str) -> Transform:
    def transform(obj: ObjectInfo) -> int:
        rel_path = relative_key(obj.key, prefix)
        local_path = os.path.join(local_dir, *rel_path.split(SEPARATOR))
        if obj.is_dir:
            os.makedirs(local_path, exist_ok=True)
            return 0
        parent = os.path.dirname(local_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        store.download_file(bucket, obj.key, local_path)
        return obj.size
    return transform


def download_file_transform(store: ObjectStore, bucket: str, local_path: str) -> Transform:
    """Download a single object to exactly local_path."""
    def transform(obj: ObjectInfo) -> int:
        store.download_file(bucket, obj.key, local_path)
        return obj.size
    return transform


def walk_local(local_root: str) -> Iterator[Tuple[str, str]]:
    """Yield (local_path, relative_key) for every file below local_root."""
    for dirpath, dirnames, filenames in os.walk(local_root):
        dirnames.sort()
        for filename in sorted(filenames):
            local_path = os.path.join(dirpath, filename)
            rel_path = os.path.relpath(local_path, local_root)
            yield local_path, rel_path.replace(os.sep, SEPARATOR)


def upload_items(local_root: str, prefix: str) -> Iterator[Tuple[str, str]]:
    """Yield (local_path, destination_key) for every file below local_root."""
    for local_path, rel_key in walk_local(local_root):
        yield local_path, prefix + rel_key


def upload_transform(store: ObjectStore, bucket: str) -> Transform:
    def transform(item: Tuple[str, str]) -> int:
        local_path, key = item
        size = os.path.getsize(local_path)
        store.upload_file(local_path, bucket, key)
        return size
    return transform
