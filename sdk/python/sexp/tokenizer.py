"""Character-level tokenizer for S-expressions with unbounded backtracking."""

import io
import unicodedata
from typing import Iterator, Optional, TextIO, Union

from .types import Token, TokenKind

Source = Union[str, TextIO]


class UnreadError(RuntimeError):
    pass


class _CharReader:
    """Reads one character at a time; can push back the last one read."""

    __slots__ = ("_stream", "_last", "_pushed")

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._last = ""
        self._pushed = False

    def read(self) -> str:
        if self._pushed:
            self._pushed = False
            return self._last
        self._last = self._stream.read(1)
        return self._last

    def unread(self) -> None:
        if self._pushed or not self._last:
            raise RuntimeError("no character to push back")
        self._pushed = True


def _is_space(ch: str) -> bool:
    # The information separators \x1c-\x1f are symbol characters here.
    return ch.isspace() and ch not in "\x1c\x1d\x1e\x1f"


def _is_digit(ch: str) -> bool:
    return unicodedata.category(ch).startswith("N")


def _is_number_start(ch: str) -> bool:
    return _is_digit(ch) or ch == "-"


def _is_number_char(ch: str) -> bool:
    return _is_digit(ch) or ch in "-.e"


def _is_symbol_char(ch: str) -> bool:
    return ch not in '()"' and not _is_space(ch)


class Tokenizer:
    """Splits a character source into tokens.

    Every emitted token is kept in ``history`` until it is handed back with
    :meth:`unread`, which moves it onto a pending stack that
    :meth:`next_token` drains before scanning more input. Backtracking
    depth is therefore bounded only by the number of tokens read so far.

    Args:
        source: A string or a text stream supporting ``read(1)``.
    """

    def __init__(self, source: Source):
        if isinstance(source, str):
            source = io.StringIO(source)
        self._reader = _CharReader(source)
        self._history: list[Token] = []
        self._unread: list[Token] = []

    @property
    def history(self) -> tuple[Token, ...]:
        return tuple(self._history)

    @property
    def pending(self) -> tuple[Token, ...]:
        """Tokens handed back and not yet re-read, next one last."""
        return tuple(self._unread)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def next_token(self) -> Optional[Token]:
        """Return the next token, or None at end of input."""
        if self._unread:
            token = self._unread.pop()
            self._history.append(token)
            return token

        token = self._scan()
        if token is not None:
            self._history.append(token)
        return token

    def unread(self) -> None:
        """Push the most recently emitted token back onto the input."""
        if not self._history:
            raise UnreadError("unable to unread")
        self._unread.append(self._history.pop())

    def peek(self) -> Optional[Token]:
        """Return the next token without consuming it."""
        token = self.next_token()
        if token is None:
            return None
        try:
            self.unread()
        except UnreadError:
            return None
        return token

    def _scan(self) -> Optional[Token]:
        r = self._reader
        ch = r.read()
        while ch and _is_space(ch):
            ch = r.read()
        if not ch:
            return None

        if ch == "(":
            return Token(TokenKind.OPEN_PAREN, ch)
        if ch == ")":
            return Token(TokenKind.CLOSE_PAREN, ch)
        if _is_number_start(ch):
            return Token(TokenKind.NUMBER, self._read_run(ch, _is_number_char))
        if ch == '"':
            return Token(TokenKind.STRING, self._read_string())
        return Token(TokenKind.SYMBOL, self._read_run(ch, _is_symbol_char))

    def _read_run(self, first: str, accept) -> str:
        buf = [first]
        while True:
            ch = self._reader.read()
            if not ch:
                break
            if not accept(ch):
                self._reader.unread()
                break
            buf.append(ch)
        return "".join(buf)

    def _read_string(self) -> str:
        # Only the single preceding character is checked, so a literal
        # ending in an escaped backslash (\\") does not terminate here.
        # An unterminated literal runs to end of input.
        buf = ['"']
        prev = '"'
        while True:
            ch = self._reader.read()
            if not ch:
                break
            buf.append(ch)
            if ch == '"' and prev != "\\":
                break
            prev = ch
        return "".join(buf)
