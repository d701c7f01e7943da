"""Data containers shared by the session, batch engine and commands."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, NamedTuple, Optional

from .formatting import human_readable_size, pluralize

SEPARATOR = '/'


@dataclass
class ObjectInfo:
    """A listed object, a marker object or a synthesized common prefix."""

    key: str
    size: int = 0
    last_modified: Optional[datetime] = None

    @property
    def is_dir(self) -> bool:
        return self.key.endswith(SEPARATOR)

    @property
    def name(self) -> str:
        parts = self.key.rstrip(SEPARATOR).split(SEPARATOR)
        return parts[-1]


class StatResult(NamedTuple):
    is_file: bool
    is_dir: bool
    size: int

    @property
    def exists(self) -> bool:
        return self.is_file or self.is_dir


@dataclass
class BatchResult:
    """Aggregated outcome of a batch operation."""

    keys: List[str] = field(default_factory=list)
    total_bytes: int = 0
    error: Optional[Exception] = None

    @property
    def count(self) -> int:
        return len(self.keys)

    def add(self, key: str, size: int):
        self.keys.append(key)
        self.total_bytes += size

    def summary(self) -> str:
        return f"{human_readable_size(self.total_bytes)} ({pluralize(self.count, 'file')})"
