import pydoc

from ..config import get_setting
from ..errors import Aborted, IsADirectory, NotFound
from ..formatting import human_readable_size


def do_cat(app, *args):
    """Print the contents of a remote object."""
    session = app.session
    name = args[0]
    key = session.resolve(name)
    stat = session.stat(key)
    if stat.is_dir:
        raise IsADirectory(f"{name!r} is a directory")
    if not stat.is_file:
        raise NotFound(f"File {name!r} not found")

    # SAFETY CHECK: Check size before downloading
    if stat.size > get_setting(app.config, 'cat_warn_size'):
        print(f"Warning: File is large ({human_readable_size(stat.size)}).")
        choice = app.read_line("Display anyway? [y/N]: ").strip().lower()
        if choice not in ('y', 'yes'):
            raise Aborted("cat cancelled")

    content = session.store.get_object(session.bucket, key.rstrip('/'))
    text = content.decode('utf-8', errors='replace')
    if app.interactive:
        pydoc.pager(text)
    else:
        print(text)
