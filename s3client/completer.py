import os
from contextlib import closing
from dataclasses import dataclass
from itertools import islice
from typing import List

from prompt_toolkit.completion import Completer, Completion

from .commands.base import ArgKind
from .errors import S3ClientError
from .tokenizer import Tokenizer

# upper bound of listed entries per completion request
MAX_REMOTE_CANDIDATES = 500

SPECIAL_CHARS = ' \\\'"'


@dataclass(frozen=True)
class Candidate:
    """A possible continuation of the argument being typed.

    Non-terminal candidates (directories) are meant to be completed further;
    terminal ones finish the argument.
    """

    text: str
    display: str
    terminal: bool = True


def quote_arg(text):
    """Escape characters the tokenizer would otherwise interpret."""
    return ''.join('\\' + ch if ch in SPECIAL_CHARS else ch for ch in text)


class CompletionProvider:
    def __init__(self, app):
        self.app = app

    def candidates(self, argv: List[str], index: int, partial: str) -> List[Candidate]:
        """Candidates for argv[index] (0 = the verb) starting with partial."""
        if index == 0:
            return self._command_candidates(partial)

        command = self.app.commands.get(argv[0].lower()) if argv else None
        if command is None:
            return []
        arg = command.arg_at(index - 1)
        if arg is None:
            return []

        try:
            if arg.kind == ArgKind.COMMAND:
                return self._command_candidates(partial)
            if arg.kind == ArgKind.BUCKET:
                return self._bucket_candidates(partial)
            if arg.kind == ArgKind.REMOTE_PATH:
                return self._remote_candidates(partial, include_files=True)
            if arg.kind == ArgKind.REMOTE_DIR:
                return self._remote_candidates(partial, include_files=False)
            if arg.kind == ArgKind.LOCAL_PATH:
                return self._local_candidates(partial)
            if arg.kind == ArgKind.CHOICE:
                return [Candidate(c, c) for c in arg.choices if c.startswith(partial)]
        except S3ClientError:
            return []
        return []

    def _command_candidates(self, partial):
        return [Candidate(name, name) for name in sorted(self.app.commands) if name.startswith(partial)]

    def _bucket_candidates(self, partial):
        buckets = self.app.session.store.list_buckets()
        return [Candidate(name, name) for name in buckets if name.startswith(partial)]

    def _remote_candidates(self, partial, include_files):
        session = self.app.session
        if not session.in_bucket:
            # cd and ls fall back to buckets while at root
            return self._bucket_candidates(partial)

        if partial.startswith('/'):
            base = ''
            listing_prefix = partial.lstrip('/')
            lead = '/'
        else:
            base = session.prefix
            listing_prefix = session.prefix + partial
            lead = ''

        candidates = []
        listing = session.store.iter_objects(session.bucket, listing_prefix, recursive=False)
        with closing(listing) as objects:
            for obj in islice(objects, MAX_REMOTE_CANDIDATES):
                if obj.key == listing_prefix and obj.is_dir:
                    continue
                if not obj.is_dir and not include_files:
                    continue
                display = obj.name + ('/' if obj.is_dir else '')
                candidates.append(Candidate(lead + obj.key[len(base):], display, terminal=not obj.is_dir))
        return candidates

    def _local_candidates(self, partial):
        """Complete local filesystem paths."""
        path = os.path.expanduser(partial)
        dir_path = os.path.dirname(path)
        name_part = os.path.basename(path)

        if not dir_path:
            dir_path = '.'
        elif not os.path.isdir(dir_path):
            return []

        try:
            names = sorted(os.listdir(dir_path))
        except OSError:
            return []

        candidates = []
        for name in names:
            if not name.startswith(name_part):
                continue
            completion_text = os.path.join(os.path.dirname(partial), name)
            if os.path.isdir(os.path.join(dir_path, name)):
                candidates.append(Candidate(completion_text + os.sep, name + os.sep, terminal=False))
            else:
                candidates.append(Candidate(completion_text, name))
        return candidates


class S3ClientCompleter(Completer):
    """prompt_toolkit adapter around :class:`CompletionProvider`."""

    def __init__(self, provider: CompletionProvider):
        self.provider = provider

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        tokenizer = Tokenizer()
        tokenizer.feed(text)
        argv = list(tokenizer.tokens)
        partial = tokenizer.pending
        start = tokenizer.token_start if tokenizer.token_start is not None else len(text)

        for candidate in self.provider.candidates(argv + [partial], len(argv), partial):
            completion = quote_arg(candidate.text)
            if candidate.terminal:
                completion += ' '
            yield Completion(completion, start_position=start - len(text), display=candidate.display)
