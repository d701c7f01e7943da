import os

from ..batch import (
    apply_recursive,
    copy_transform,
    download_file_transform,
    download_transform,
    move_transform,
    relative_key,
    run_batch,
    upload_items,
    upload_transform,
)
from ..errors import NotFound, PreconditionFailed
from ..formatting import human_readable_size
from ..models import ObjectInfo
from ..session import as_prefix


def report_batch(result):
    if result.count == 0:
        print("Directory is empty")
    else:
        print(f"Completed: {result.summary()}")


def _progress(verb, prefix):
    def show(key):
        print(f"  {verb} {relative_key(key, prefix)}")
    return show


def _remote_target(session, source_key, dest_arg):
    """Destination key for a single object; directories keep the base name."""
    dest_key = session.resolve(dest_arg)
    basename = source_key.rsplit('/', 1)[-1]
    if not dest_key or dest_key.endswith('/') or dest_arg in ('.', '..'):
        return as_prefix(dest_key) + basename
    if session.stat(dest_key).is_dir:
        return as_prefix(dest_key) + basename
    return dest_key


def do_dl(app, *args):
    """Download a remote object or directory to a local path."""
    session = app.session
    source, destination = args
    destination = os.path.expanduser(destination)
    key = session.resolve(source)
    stat = session.stat(key)

    if stat.is_file:
        local_path = destination
        if os.path.isdir(destination) or destination.endswith(os.sep):
            local_path = os.path.join(destination, os.path.basename(key))
        print(f"Source Object: {key}")
        transform = download_file_transform(session.store, session.bucket, local_path)
        result = run_batch([ObjectInfo(key, stat.size)], transform)
        print(f"Completed: {human_readable_size(result.total_bytes)}")
    elif stat.is_dir:
        prefix = as_prefix(key.rstrip('/'))
        print(f"Source directory: {prefix}")
        transform = download_transform(session.store, session.bucket, prefix, destination)
        result = apply_recursive(
            session.store, session.bucket, prefix, transform,
            progress=_progress('downloading file', prefix),
        )
        report_batch(result)
    else:
        raise NotFound(f"Object {source!r} does not exist")


def do_ul(app, *args):
    """Upload a local file or directory tree to a remote key or prefix."""
    session = app.session
    source, destination = args
    local_path = os.path.expanduser(source)
    transform = upload_transform(session.store, session.bucket)

    if os.path.isfile(local_path):
        key = session.resolve(destination)
        if not key or destination.endswith('/') or destination in ('.', '..') or session.stat(key).is_dir:
            key = as_prefix(key) + os.path.basename(local_path)
        print(f"Upload local file to: {key}")
        result = run_batch([(local_path, key)], transform)
        print(f"Completed: {human_readable_size(result.total_bytes)}")
    elif os.path.isdir(local_path):
        prefix = as_prefix(session.resolve(destination).rstrip('/'))
        print(f"Upload local directory to: {prefix or '/'}")
        result = run_batch(
            upload_items(local_path, prefix), transform,
            progress=_progress('uploading', prefix),
        )
        report_batch(result)
    else:
        raise NotFound(f"Local file {source!r} not found")


def _copy_or_move(app, source, destination, move):
    session = app.session
    src_key = session.resolve(source)
    stat = session.stat(src_key)
    make_transform = move_transform if move else copy_transform

    if stat.is_file:
        dst_key = _remote_target(session, src_key, destination)
        if dst_key == src_key:
            raise PreconditionFailed("source and destination are the same object")
        transform = make_transform(session.store, session.bucket, src_key, dst_key)
        run_batch([ObjectInfo(src_key, stat.size)], transform)
        print("Object has been moved" if move else "Object has been copied")
    elif stat.is_dir:
        src_prefix = as_prefix(src_key.rstrip('/'))
        dst_prefix = as_prefix(session.resolve(destination).rstrip('/'))
        if dst_prefix.startswith(src_prefix):
            raise PreconditionFailed("cannot copy a directory into itself")
        transform = make_transform(session.store, session.bucket, src_prefix, dst_prefix)
        result = apply_recursive(
            session.store, session.bucket, src_prefix, transform,
            progress=_progress('Move file' if move else 'Copy file', src_prefix),
        )
        if move and session.prefix.startswith(src_prefix):
            session.prefix = dst_prefix + session.prefix[len(src_prefix):]
        report_batch(result)
    else:
        raise NotFound(f"Object {source!r} does not exist")


def do_cp(app, *args):
    """Copy a remote object or directory to a new key or prefix."""
    _copy_or_move(app, args[0], args[1], move=False)


def do_mv(app, *args):
    """Move a remote object or directory (copy, then delete each source)."""
    _copy_or_move(app, args[0], args[1], move=True)
