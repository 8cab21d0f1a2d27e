"""Runtime support for lexers: input reading, location tracking and backtracking."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Callable, Generic, Iterable, Iterator, Optional, TypeVar

from wcwidth import wcwidth

S = TypeVar("S")

Action = Callable[..., object]

TAB_WIDTH = 4


@dataclass(frozen=True)
class Loc:
    """A location in an input."""

    line: int = 0
    """Zero-based line number."""
    col: int = 0
    """Zero-based display column within the line."""
    byte_idx: int = 0
    """Zero-based UTF-8 byte offset in the input."""

    def advance(self, char: str) -> Loc:
        """The location just after ``char``, when ``char`` starts at this location."""
        byte_idx = self.byte_idx + len(char.encode("utf-8"))
        if char == "\n":
            return Loc(self.line + 1, 0, byte_idx)
        if char == "\t":
            return Loc(self.line, self.col + TAB_WIDTH, byte_idx)
        width = wcwidth(char)
        return Loc(self.line, self.col + (width if width >= 0 else 1), byte_idx)


class LexerErrorKind(enum.Enum):
    """Why lexing failed."""

    INVALID_TOKEN = "invalid token"
    """No rule matched the input."""
    CUSTOM = "custom"
    """A semantic action reported an error of its own."""


class LexerError(Exception):
    """A lexing error at a location, optionally carrying a custom error value."""

    def __init__(
        self, location: Loc, kind: LexerErrorKind, custom: object = None
    ) -> None:
        super().__init__(location, kind, custom)
        self.location = location
        self.kind = kind
        self.custom = custom

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LexerError):
            return NotImplemented
        return (self.location, self.kind, self.custom) == (
            other.location,
            other.kind,
            other.custom,
        )

    __hash__ = Exception.__hash__

    def __str__(self) -> str:
        where = f"line {self.location.line}, column {self.location.col}"
        if self.kind is LexerErrorKind.CUSTOM:
            return f"{self.custom} at {where}"
        return f"invalid token at {where}"

    def __repr__(self) -> str:
        return (
            f"LexerError(location={self.location!r}, kind={self.kind!r}, "
            f"custom={self.custom!r})"
        )


@dataclass(frozen=True)
class _Mark:
    """A skipped accepting match to fall back to."""

    start: Loc
    start_pos: int
    action: Action
    end: Loc
    end_pos: int


class Lexer(Generic[S]):
    """Common state of a lexer: the input, the current match and the last accepted match.

    ``current_rule`` is the rule set being run, ``initial_rule`` the rule set
    to return to after a successful match, and ``done`` is set once end of
    input has been handled. ``state`` holds the user's own state.
    """

    def __init__(self, text: str = "", state: Optional[S] = None) -> None:
        self.current_rule = 0
        self.done = False
        self.initial_rule = 0
        self.state = state
        self._source: Iterator[str] = iter(text)
        self._buffer: list[str] = []
        self._pos = 0
        self._match_start = Loc()
        self._match_start_pos = 0
        self._match_end = Loc()
        self._last_match: Optional[_Mark] = None

    @classmethod
    def from_iter(cls, chars: Iterable[str], state: Optional[S] = None) -> Lexer[S]:
        """A lexer reading characters from an iterable instead of a string."""
        lexer: Lexer[S] = cls("", state)
        lexer._source = iter(chars)
        return lexer

    def _fill(self) -> bool:
        if self._pos < len(self._buffer):
            return True
        char = next(self._source, None)
        if char is None:
            return False
        self._buffer.append(char)
        return True

    def next_char(self) -> Optional[str]:
        """Consume and return the next character, or None at end of input."""
        if not self._fill():
            return None
        char = self._buffer[self._pos]
        self._pos += 1
        self._match_end = self._match_end.advance(char)
        return char

    def peek(self) -> Optional[str]:
        """The next character without consuming it, or None at end of input."""
        if not self._fill():
            return None
        return self._buffer[self._pos]

    def backtrack(self) -> Action:
        """Return to the last accepted match and return its semantic action.

        Raises LexerError at the start of the current match when there is no
        accepted match to return to; the rule set is then reset to the first.
        """
        mark = self._last_match
        self._last_match = None
        if mark is None:
            self.current_rule = 0
            raise LexerError(self._match_start, LexerErrorKind.INVALID_TOKEN)
        self.done = False
        self._match_start = mark.start
        self._match_start_pos = mark.start_pos
        self._match_end = mark.end
        self._pos = mark.end_pos
        return mark.action

    def reset_accepting_state(self) -> None:
        """Forget the last accepted match."""
        self._last_match = None

    def set_accepting_state(self, action: Action) -> None:
        """Remember the current match, to be run with ``action`` on backtracking."""
        self._last_match = _Mark(
            self._match_start,
            self._match_start_pos,
            action,
            self._match_end,
            self._pos,
        )

    def reset_match(self) -> None:
        """Start a new match at the current position."""
        self._match_start = self._match_end
        self._match_start_pos = self._pos

    def match_text(self) -> str:
        """The text of the current match."""
        return "".join(self._buffer[self._match_start_pos : self._pos])

    def match_loc(self) -> tuple[Loc, Loc]:
        """Start and end locations of the current match."""
        return self._match_start, self._match_end

    def _replace_end(self, **changes: int) -> None:
        self._match_end = replace(self._match_end, **changes)