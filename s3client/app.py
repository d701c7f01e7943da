import copy
from typing import Callable, List, Optional

from prompt_toolkit import PromptSession, prompt
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import CompleteStyle

from .commands.base import ArgKind, ArgSpec, Command, check_args
from .commands.buckets import LIST_TYPES, do_list, do_mkbucket, do_rmbucket
from .commands.navigation import do_cd, do_enter, do_leave, do_ls, do_pwd
from .commands.objects import do_rm, do_touch
from .commands.read import do_cat
from .commands.search import do_find
from .commands.shell import do_clear, do_exit, do_help
from .commands.transfer import do_cp, do_dl, do_mv, do_ul
from .completer import CompletionProvider, S3ClientCompleter
from .config import DEFAULT_CONFIG, get_setting, history_path
from .errors import ArgumentError, S3ClientError
from .formatting import format_prompt
from .session import Session
from .tokenizer import tokenize

CONTINUATION_PROMPT = '> '


def build_commands():
    remote = ArgSpec('object name', ArgKind.REMOTE_PATH)
    commands = [
        Command('help', do_help, [ArgSpec('command', ArgKind.COMMAND)],
                summary='show this help'),
        Command('enter', do_enter, [ArgSpec('bucket name', ArgKind.BUCKET)], min_args=1,
                summary='enter bucket with given name'),
        Command('leave', do_leave, require_bucket=True,
                summary='leave current bucket'),
        Command('cd', do_cd, [ArgSpec('dir name', ArgKind.REMOTE_DIR)], min_args=1,
                summary='enter named directory or ".." for parent dir'),
        Command('ls', do_ls, [ArgSpec('dir name', ArgKind.REMOTE_DIR)],
                summary='list objects in current bucket and path'),
        Command('pwd', do_pwd,
                summary='print current bucket and path'),
        Command('rm', do_rm, [remote, ArgSpec('arg', ArgKind.CHOICE, ('-r',))], min_args=1, require_bucket=True,
                summary='remove object; use "-r" to remove a directory recursively'),
        Command('dl', do_dl, [ArgSpec('source', ArgKind.REMOTE_PATH), ArgSpec('destination', ArgKind.LOCAL_PATH)],
                min_args=2, require_bucket=True,
                summary='download remote object {src} to local path {dst}'),
        Command('ul', do_ul, [ArgSpec('source', ArgKind.LOCAL_PATH), ArgSpec('destination', ArgKind.REMOTE_PATH)],
                min_args=2, require_bucket=True,
                summary='upload local file or directory {src} to remote key {dst}'),
        Command('mv', do_mv, [ArgSpec('source', ArgKind.REMOTE_PATH), ArgSpec('destination', ArgKind.REMOTE_PATH)],
                min_args=2, require_bucket=True,
                summary='move remote object {src} to new key {dst}'),
        Command('cp', do_cp, [ArgSpec('source', ArgKind.REMOTE_PATH), ArgSpec('destination', ArgKind.REMOTE_PATH)],
                min_args=2, require_bucket=True,
                summary='copy remote object {src} to new key {dst}'),
        Command('touch', do_touch, [remote], min_args=1, require_bucket=True,
                summary='create an empty object with key {name}'),
        Command('cat', do_cat, [remote], min_args=1, require_bucket=True,
                summary='print content of object {name}'),
        Command('find', do_find, [ArgSpec('needle'), ArgSpec('prefix', ArgKind.REMOTE_DIR)],
                min_args=1, require_bucket=True,
                summary='list objects with {needle} in the last part of the key'),
        Command('list', do_list, [ArgSpec('list type', ArgKind.CHOICE, LIST_TYPES)], min_args=1,
                summary='list items of type bucket or env'),
        Command('mkbucket', do_mkbucket, [ArgSpec('bucket name')], min_args=1,
                summary='create new bucket with given name'),
        Command('rmbucket', do_rmbucket, [ArgSpec('bucket name', ArgKind.BUCKET)], min_args=1,
                summary='delete bucket with given name'),
        Command('clear', do_clear,
                summary='clear the terminal screen'),
        Command('exit', do_exit,
                summary='exit application'),
    ]
    table = {command.name: command for command in commands}
    table['q'] = table['quit'] = table['exit']
    return table


class S3ClientApp:
    def __init__(
        self,
        session: Session,
        config: Optional[dict] = None,
        read_line: Optional[Callable[[str], str]] = None,
        env_dir: Optional[str] = None,
    ):
        self.session = session
        self.config = config if config is not None else copy.deepcopy(DEFAULT_CONFIG)
        self.colors = get_setting(self.config, 'colors')
        self.env_dir = env_dir
        self.commands = build_commands()
        self.interactive = False
        self._read_line = read_line
        self.prompt_session = None

    def get_prompt(self):
        session = self.session
        return ANSI(format_prompt(session.target.key, session.bucket, session.prefix, self.colors))

    def read_line(self, message: str) -> str:
        """Read one plain line of user input (confirmations, continuations)."""
        if self._read_line is not None:
            return self._read_line(message)
        return prompt(message)

    def _create_prompt_session(self):
        if get_setting(self.config, 'history'):
            history = FileHistory(history_path())
        else:
            history = InMemoryHistory()
        return PromptSession(
            history=history,
            completer=S3ClientCompleter(CompletionProvider(self)),
            complete_style=CompleteStyle.COLUMN,
            complete_while_typing=False,
        )

    def read_command(self) -> List[str]:
        if self._read_line is not None:
            line = self._read_line(self.get_prompt())
        else:
            with patch_stdout():
                line = self.prompt_session.prompt(self.get_prompt())
        return tokenize(line, lambda: self.read_line(CONTINUATION_PROMPT))

    def run(self):
        """Main loop to run the shell application."""
        self.interactive = True
        if self._read_line is None and self.prompt_session is None:
            self.prompt_session = self._create_prompt_session()
        print("s3client shell. Type 'help' or 'exit'.")
        while True:
            try:
                argv = self.read_command()
                if not argv:
                    continue
                if not self.handle_command(argv):
                    break
            except KeyboardInterrupt:
                continue
            except EOFError:
                print("\nExiting...")
                break

    def handle_command(self, argv: List[str]) -> bool:
        """Execute argv, reporting errors instead of raising them."""
        try:
            should_continue = self.execute(argv)
            return should_continue if should_continue is not None else True
        except S3ClientError as e:
            print(f"ERR: {e}")
            return True
        except Exception as e:
            print(f"Error processing command: {e}")
            return True

    def execute(self, argv: List[str]):
        """Validate and run one command; errors propagate to the caller."""
        if not argv:
            raise ArgumentError("No command specified")
        command_name = argv[0].lower()
        args = argv[1:]
        command = self.commands.get(command_name)
        if command is None:
            raise ArgumentError(
                f'unknown command {command_name!r}. Use "help" to show a list of available commands'
            )
        check_args(self.session, command, args)
        return command.handler(self, *args)
