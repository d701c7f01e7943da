from typing import Callable, List, Optional

from .errors import ArgumentError


class Tokenizer:
    """Incremental, quote-aware splitter for shell input.

    Lines are fed one at a time. While a quote is open (or the last line ended
    with a backslash) ``needs_more`` is true and the next fed line continues
    the current token after a newline.
    """

    def __init__(self):
        self.tokens: List[str] = []
        self._buffer: List[str] = []
        self._single_quote = False
        self._double_quote = False
        self._escape = False
        # column in the last fed line where the pending token began
        self.token_start: Optional[int] = None

    @property
    def needs_more(self) -> bool:
        return self._single_quote or self._double_quote or self._escape

    @property
    def pending(self) -> str:
        """The token currently being accumulated."""
        return ''.join(self._buffer)

    def feed(self, line: str):
        if self.needs_more:
            # continuation line: the line break belongs to the open token
            self._buffer.append('\n')
            self._escape = False
        if self._buffer:
            self.token_start = 0

        for i, ch in enumerate(line):
            if self.token_start is None and ch != ' ':
                self.token_start = i

            if self._single_quote:
                if ch == "'":
                    self._single_quote = False
                else:
                    self._buffer.append(ch)
            elif self._double_quote:
                if self._escape:
                    self._buffer.append(ch)
                    self._escape = False
                elif ch == '"':
                    self._double_quote = False
                elif ch == '\\':
                    self._escape = True
                else:
                    self._buffer.append(ch)
            elif self._escape:
                self._buffer.append(ch)
                self._escape = False
            elif ch == '\\':
                self._escape = True
            elif ch == "'":
                self._single_quote = True
            elif ch == '"':
                self._double_quote = True
            elif ch == ' ':
                self._flush()
            else:
                self._buffer.append(ch)

    def finish(self) -> List[str]:
        """Close the last token and return all tokens."""
        self._flush()
        return self.tokens

    def _flush(self):
        if self._buffer:
            self.tokens.append(''.join(self._buffer))
            self._buffer = []
        self.token_start = None


def tokenize(line: str, read_continuation: Optional[Callable[[], str]] = None) -> List[str]:
    """Split ``line`` into an argument vector.

    ``read_continuation`` is called for every further line needed to close an
    open quote or escape; it may raise ``EOFError``, which is propagated.
    Without it an unterminated line is an :class:`ArgumentError`.
    """
    tokenizer = Tokenizer()
    tokenizer.feed(line)
    while tokenizer.needs_more:
        if read_continuation is None:
            raise ArgumentError("unterminated quote or escape at end of input")
        tokenizer.feed(read_continuation())
    return tokenizer.finish()
