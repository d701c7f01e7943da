from contextlib import closing

from ..errors import NotFound
from ..formatting import (
    format_bucket_entry,
    format_dir_entry,
    format_file_entry,
    format_found,
)
from ..session import as_prefix


def print_buckets(app):
    buckets = app.session.store.list_buckets()
    if not buckets:
        print('No buckets found. Use "mkbucket {name}" to create one')
        return
    print(format_found(len(buckets), 'bucket'))
    for name in buckets:
        print(format_bucket_entry(name))


def print_objects(app, prefix, recursive=False, accept=None, format_name=None):
    """List objects below prefix as D/F rows.

    ``accept`` filters listed objects, ``format_name`` decorates the name
    shown (relative to prefix) before printing.
    """
    session = app.session
    entries = []
    has_files = False
    with closing(session.store.iter_objects(session.bucket, prefix, recursive=recursive)) as objects:
        for obj in objects:
            if obj.key == prefix:
                # the marker of the listed directory itself
                continue
            if accept is not None and not accept(obj):
                continue
            entries.append(obj)
            if not obj.is_dir:
                has_files = True

    if not entries:
        print("No objects found.")
        return entries

    print(format_found(len(entries), 'object'))
    for obj in entries:
        name = obj.key[len(prefix):]
        if obj.is_dir:
            name = name[:-1]
        if format_name is not None:
            name = format_name(name)
        if obj.is_dir:
            print(format_dir_entry(name, pad=has_files))
        else:
            print(format_file_entry(name, obj.size))
    return entries


def do_enter(app, *args):
    """Enter a bucket."""
    app.session.enter_bucket(args[0])


def do_leave(app, *args):
    app.session.leave_bucket()


def do_cd(app, *args):
    """Change the current prefix; without a bucket, enter one instead."""
    app.session.change_directory(args[0])


def do_pwd(app, *args):
    session = app.session
    if not session.in_bucket:
        print("/")
    else:
        print(f"/{session.bucket}/{session.prefix}")


def do_ls(app, *args):
    """List objects of the current prefix or the given directory."""
    session = app.session
    if not session.in_bucket:
        print("No bucket entered yet. Listing buckets instead")
        print_buckets(app)
        return

    prefix = session.prefix
    if args:
        key = session.resolve(args[0])
        result = session.stat(key)
        if result.is_file:
            print(format_found(1, 'object'))
            print(format_file_entry(session.display_path(key), result.size))
            return
        if not result.is_dir:
            raise NotFound(f"Directory {args[0]!r} not found")
        prefix = as_prefix(key.rstrip('/'))

    print_objects(app, prefix)
