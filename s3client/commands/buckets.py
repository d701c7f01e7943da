from ..batch import apply_recursive, delete_transform
from ..environments import get_environments
from ..errors import Aborted, AlreadyExists, ArgumentError, NotFound
from ..formatting import format_env_entry, format_found, format_warning_banner
from .navigation import print_buckets

LIST_TYPES = ('bucket', 'env')
DELETE_CONFIRMATION = 'DELETE'


def do_list(app, *args):
    """List buckets or saved environments."""
    list_type = args[0]
    if list_type in ('bucket', 'buckets'):
        print_buckets(app)
    elif list_type in ('env', 'envs'):
        environments = get_environments(app.env_dir)
        if not environments:
            print('No environments saved yet. Use "-e {name}" to create one')
            return
        width = max(len(e.key) for e in environments)
        print(format_found(len(environments), 'environment'))
        for env in environments:
            print(format_env_entry(env.key, env.endpoint_url, width))
    else:
        raise ArgumentError(
            f'unknown list type {list_type!r}. Possible parameters are "bucket" and "env"'
        )


def do_mkbucket(app, *args):
    """Create a bucket; at root the new bucket is entered."""
    session = app.session
    name = args[0]
    if session.store.bucket_exists(name):
        raise AlreadyExists(f"bucket {name!r} already exists")
    session.store.make_bucket(name)
    print(f"bucket {name!r} created")
    if not session.in_bucket:
        session.bucket = name
        session.prefix = ''


def do_rmbucket(app, *args):
    """Delete a bucket and everything in it after two confirmations."""
    session = app.session
    name = args[0]
    if not session.store.bucket_exists(name):
        raise NotFound(f"bucket {name!r} does not exist")

    print(format_warning_banner("WARNING: POSSIBLE LOSS OF DATA", app.colors))
    print(f"You are about to delete bucket {name!r}.")
    print("All data stored in this bucket will be lost and cannot be restored!")
    print("Please confirm deletion by entering the bucket name below:")
    if app.read_line("> ") != name:
        raise Aborted("Input mismatch. Bucket was NOT deleted")

    print(format_warning_banner("WARNING: THIS CAN NOT BE UNDONE", app.colors))
    print(f"Are you sure? Please enter {DELETE_CONFIRMATION} to finally delete the bucket:")
    if app.read_line("> ") != DELETE_CONFIRMATION:
        raise Aborted("Abort. Bucket was NOT deleted")

    # buckets must be empty before they can be removed
    result = apply_recursive(session.store, name, '', delete_transform(session.store, name))
    if result.count:
        print(f"Deleted {result.summary()}")
    session.store.remove_bucket(name)

    print(f"Bucket {name!r} has been deleted")
    if session.bucket == name:
        session.reset()
