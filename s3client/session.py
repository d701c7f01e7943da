from contextlib import closing

from .errors import NotADirectory, NotFound, PreconditionFailed
from .models import SEPARATOR, StatResult
from .providers.base import ObjectStore


def normalize_path(path: str) -> str:
    """Collapse empty, '.' and '..' segments; keep a trailing separator."""
    trailing = path.endswith(SEPARATOR)
    normalized_parts = []
    for part in path.split(SEPARATOR):
        if part == '..':
            if normalized_parts:
                normalized_parts.pop()
        elif part and part != '.':
            normalized_parts.append(part)
    normalized = SEPARATOR.join(normalized_parts)
    if trailing and normalized:
        normalized += SEPARATOR
    return normalized


def parent_prefix(prefix: str) -> str:
    """'a/b/' -> 'a/', 'a/' -> '', '' -> ''."""
    parts = prefix.rstrip(SEPARATOR).split(SEPARATOR)
    if len(parts) > 1:
        return SEPARATOR.join(parts[:-1]) + SEPARATOR
    return ''


def as_prefix(key: str) -> str:
    if key and not key.endswith(SEPARATOR):
        return key + SEPARATOR
    return key


class Session:
    """Connection and working location of one shell.

    ``bucket`` is empty while at root; ``prefix`` is either empty or ends in
    the separator and is only meaningful while a bucket is entered.
    """

    def __init__(self, target, store: ObjectStore):
        self.target = target
        self.store = store
        self.bucket = ''
        self.prefix = ''

    @property
    def in_bucket(self) -> bool:
        return bool(self.bucket)

    def reset(self):
        self.bucket = ''
        self.prefix = ''

    def enter_bucket(self, name: str):
        if not self.store.bucket_exists(name):
            raise NotFound(f"bucket {name!r} does not exist")
        self.bucket = name
        self.prefix = ''

    def leave_bucket(self):
        if not self.in_bucket:
            raise PreconditionFailed("No bucket entered yet")
        self.reset()

    def change_directory(self, name: str):
        if not self.in_bucket:
            print(f"No bucket entered yet. Entering bucket {name!r} instead")
            self.enter_bucket(name)
            return

        if name == '..':
            self.prefix = parent_prefix(self.prefix)
            return
        if name.strip(SEPARATOR) == '':
            self.prefix = ''
            return

        key = self.resolve(name).rstrip(SEPARATOR)
        if not key:
            self.prefix = ''
            return
        result = self.stat(key)
        if result.is_file:
            raise NotADirectory(f"{name!r} is a file")
        if not result.is_dir:
            raise NotFound(f"Directory {name!r} not found")
        self.prefix = key + SEPARATOR

    def resolve(self, name: str) -> str:
        """Translate a user supplied name into a full object key."""
        if name.startswith(SEPARATOR):
            return normalize_path(name.lstrip(SEPARATOR))
        return normalize_path(self.prefix + name)

    def stat(self, key: str) -> StatResult:
        if key.endswith(SEPARATOR):
            key = key[:-1]
        if not key:
            return StatResult(False, True, 0)
        dir_key = key + SEPARATOR

        with closing(self.store.iter_objects(self.bucket, key, recursive=False)) as objects:
            for obj in objects:
                if obj.key == dir_key:
                    return StatResult(False, True, 0)
                if obj.key == key:
                    return StatResult(True, False, obj.size)
                if obj.key > dir_key:
                    break
        return StatResult(False, False, 0)

    def display_path(self, key: str) -> str:
        """A key relative to the working prefix when it lies below it."""
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix):]
        return key
