from ..batch import apply_recursive, delete_transform, relative_key, run_batch
from ..errors import AlreadyExists, ArgumentError, NotFound, PreconditionFailed
from ..models import ObjectInfo
from ..session import as_prefix, parent_prefix
from .transfer import report_batch

RECURSIVE_FLAG = '-r'


def do_rm(app, *args):
    """Remove an object, or with -r every object below a directory."""
    session = app.session
    recursive = RECURSIVE_FLAG in args
    names = [a for a in args if a != RECURSIVE_FLAG]
    if len(names) != 1:
        raise ArgumentError(f'unexpected argument; use "rm {{name}} {RECURSIVE_FLAG}" to remove a directory')
    name = names[0]

    key = session.resolve(name)
    stat = session.stat(key)
    transform = delete_transform(session.store, session.bucket)

    if stat.is_file:
        run_batch([ObjectInfo(key.rstrip('/'), stat.size)], transform)
        print(f"Object {name!r} has been deleted")
    elif stat.is_dir:
        if not recursive:
            raise PreconditionFailed(f'Please use "rm {{name}} {RECURSIVE_FLAG}" when deleting a directory')
        prefix = as_prefix(key.rstrip('/'))
        if not prefix:
            raise PreconditionFailed('refusing to delete the bucket root, use "rmbucket {name}" instead')

        def show(deleted_key):
            print(f"  deleting {relative_key(deleted_key, prefix) or prefix}")

        result = apply_recursive(session.store, session.bucket, prefix, transform, progress=show)
        if session.prefix.startswith(prefix):
            # the working directory is gone
            session.prefix = parent_prefix(prefix)
        report_batch(result)
    else:
        raise NotFound(f"Object {name!r} does not exist")


def do_touch(app, *args):
    """Create an empty object; a name ending in '/' creates a directory marker."""
    session = app.session
    name = args[0]
    key = session.resolve(name)
    if not key:
        raise ArgumentError(f"invalid object name {name!r}")
    if session.stat(key).exists:
        raise AlreadyExists(f"Object {name!r} already exists")
    session.store.put_object(session.bucket, key, b'')
    print("Object has been created")
