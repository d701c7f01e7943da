import enum
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

from ..errors import ArgumentError, PreconditionFailed


class ArgKind(enum.Enum):
    """What an argument position holds; drives tab completion."""

    NONE = "none"
    COMMAND = "command"
    BUCKET = "bucket"
    REMOTE_PATH = "remote-path"
    REMOTE_DIR = "remote-dir"
    LOCAL_PATH = "local-path"
    CHOICE = "choice"


@dataclass(frozen=True)
class ArgSpec:
    label: str
    kind: ArgKind = ArgKind.NONE
    choices: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Command:
    name: str
    handler: Callable
    args: Sequence[ArgSpec] = field(default_factory=tuple)
    min_args: int = 0
    require_bucket: bool = False
    summary: str = ''

    def arg_at(self, index: int):
        """ArgSpec for the argument at index (0 = first argument), or None."""
        if 0 <= index < len(self.args):
            return self.args[index]
        return None


NO_BUCKET_MESSAGE = (
    'No bucket entered yet. Please list all available buckets via "list bucket" '
    'and then enter a bucket using "enter {name}"'
)


def check_args(session, command: Command, args: List[str]):
    """Validate state and arity before a handler touches the store."""
    if command.require_bucket and not session.in_bucket:
        raise PreconditionFailed(NO_BUCKET_MESSAGE)
    if len(args) < command.min_args:
        raise ArgumentError(f"missing parameter {command.args[len(args)].label}")
    if len(args) > len(command.args):
        raise ArgumentError("too many arguments")
