"""Regular expression syntax trees used to describe lexer rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple, Union


def _check_char(value: object, what: str) -> None:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"{what} must be a single character, got {value!r}")


@dataclass(frozen=True)
class Char:
    """Matches one specific character."""

    char: str

    def __post_init__(self) -> None:
        _check_char(self.char, "Char")


@dataclass(frozen=True)
class Str:
    """Matches a literal string, character by character."""

    text: str


CharSetItem = Union[str, Tuple[str, str]]


@dataclass(frozen=True)
class CharSet:
    """Matches any one of the given characters or inclusive character ranges.

    Each item is either a single character or a ``(start, end)`` pair.
    """

    items: Tuple[CharSetItem, ...]

    def __init__(self, items: Iterable[CharSetItem]) -> None:
        normalized: list[CharSetItem] = []
        for item in items:
            if isinstance(item, str):
                _check_char(item, "char set item")
                normalized.append(item)
            else:
                start, end = item
                _check_char(start, "range start")
                _check_char(end, "range end")
                if ord(start) > ord(end):
                    raise ValueError(f"empty character range {start!r}-{end!r}")
                normalized.append((start, end))
        object.__setattr__(self, "items", tuple(normalized))


@dataclass(frozen=True)
class ZeroOrMore:
    """``regex*``"""

    regex: "Regex"


@dataclass(frozen=True)
class OneOrMore:
    """``regex+``"""

    regex: "Regex"


@dataclass(frozen=True)
class ZeroOrOne:
    """``regex?``"""

    regex: "Regex"


@dataclass(frozen=True)
class Concat:
    """``first`` followed by ``second``."""

    first: "Regex"
    second: "Regex"


@dataclass(frozen=True)
class Or:
    """Either ``first`` or ``second``."""

    first: "Regex"
    second: "Regex"


@dataclass(frozen=True)
class Any:
    """Matches any single character (``_``)."""


@dataclass(frozen=True)
class EndOfInput:
    """Matches the end of the input (``$``)."""


@dataclass(frozen=True)
class Diff:
    """Characters matched by ``first`` but not by ``second`` (``first # second``)."""

    first: "Regex"
    second: "Regex"


@dataclass(frozen=True)
class Var:
    """A reference to a named regular expression in the bindings."""

    name: str


Regex = Union[
    Char, Str, CharSet, ZeroOrMore, OneOrMore, ZeroOrOne, Concat, Or, Any, EndOfInput, Diff, Var
]