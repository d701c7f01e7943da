import argparse
import sys

from prompt_toolkit import prompt

from . import __version__
from .app import S3ClientApp
from .config import get_setting, load_config
from .environments import ConnectionTarget, Origin, check_env_key, load_or_create_env, select_env, split_url
from .errors import S3ClientError
from .providers.s3 import S3Store, create_s3_client
from .session import Session


def read_line(message):
    return prompt(message)


def read_secret(message):
    return prompt(message, is_password=True)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='s3client',
        description='s3client - Interactive shell for S3-compatible object stores',
    )
    parser.add_argument('-e', dest='env', help='name of a saved environment (created interactively if unknown)')
    parser.add_argument('--config', dest='config_path', default=None,
                        help='Path to config file (default: ~/.s3client/config.json)')
    parser.add_argument('--no-color', action='store_true', help='disable colored output')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    group = parser.add_argument_group('Connection without a saved environment')
    group.add_argument('--name', help='display name of the connection')
    group.add_argument('--url', help='endpoint URL, e.g. https://play.min.io')
    group.add_argument('--access-key', help='access key')
    group.add_argument('--secret-key', help='secret key')
    group.add_argument('--bucket-name', help='bucket to enter after connecting')
    group.add_argument('--region', help='region name (default: us-east-1)')

    parser.add_argument('command', nargs=argparse.REMAINDER, help='command to run once instead of the shell')
    args = parser.parse_args(argv)

    if args.url:
        if args.env:
            parser.error('-e cannot be combined with --url')
        if not (args.access_key and args.secret_key):
            parser.error('--url requires --access-key and --secret-key')
    elif args.access_key or args.secret_key or args.bucket_name or args.name:
        parser.error('--name, --access-key, --secret-key and --bucket-name require --url')
    return args


def build_target(args, env_dir=None) -> ConnectionTarget:
    """Resolve the connection target from flags, a named or a selected environment."""
    if args.url:
        endpoint, secure = split_url(args.url)
        name = args.name or 'cli'
        check_env_key(name)
        return ConnectionTarget(
            key=name,
            endpoint=endpoint.rstrip('/'),
            secure=True if secure is None else secure,
            access_key=args.access_key,
            secret_key=args.secret_key,
            default_bucket=args.bucket_name or '',
            region=args.region or '',
            origin=Origin.COMMAND_LINE,
        )
    if args.env:
        return load_or_create_env(args.env, read_line, read_secret, env_dir)
    return select_env(read_line, env_dir)


def main(argv=None):
    args = parse_args(argv)
    config = load_config(args.config_path)
    if args.no_color:
        config['general']['colors'] = False

    try:
        target = build_target(args)
    except S3ClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (EOFError, KeyboardInterrupt):
        print("\nAborted.", file=sys.stderr)
        sys.exit(1)

    store = S3Store(create_s3_client(target), verbose=get_setting(config, 'verbose'))
    session = Session(target, store)
    app = S3ClientApp(session, config)

    if target.default_bucket:
        try:
            session.enter_bucket(target.default_bucket)
        except S3ClientError as e:
            print(f"ERR: unable to enter default bucket {target.default_bucket!r}: {e}", file=sys.stderr)
            if target.origin == Origin.COMMAND_LINE and args.command:
                sys.exit(1)

    if args.command:
        try:
            app.execute(args.command)
        except S3ClientError as e:
            print(f"ERR: {e}", file=sys.stderr)
            sys.exit(1)
        except (EOFError, KeyboardInterrupt):
            print("\nAborted.", file=sys.stderr)
            sys.exit(1)
        return

    app.run()
