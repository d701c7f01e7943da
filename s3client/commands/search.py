from ..errors import NotADirectory, NotFound
from ..formatting import highlight
from ..session import as_prefix
from .navigation import print_objects


def _split_name(relative_name):
    """Split 'a/b/name' into ('a/b/', 'name')."""
    head, sep, last = relative_name.rpartition('/')
    return head + sep, last


def do_find(app, *args):
    """List every object below a prefix whose name contains the needle.

    Usage: find <needle> [prefix]
    Matching is case-insensitive on the last segment of the key; matches are
    highlighted.
    """
    session = app.session
    needle = args[0]

    prefix = session.prefix
    if len(args) > 1:
        key = session.resolve(args[1])
        result = session.stat(key)
        if result.is_file:
            raise NotADirectory(f"{args[1]!r} is a file")
        if not result.is_dir:
            raise NotFound(f"Directory {args[1]!r} not found")
        prefix = as_prefix(key.rstrip('/'))

    lowered = needle.lower()

    def accept(obj):
        return lowered in obj.name.lower()

    def format_name(name):
        head, last = _split_name(name)
        return head + highlight(last, needle, app.colors)

    print_objects(app, prefix, recursive=True, accept=accept, format_name=format_name)
