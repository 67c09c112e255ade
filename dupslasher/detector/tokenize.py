"""Tokenisation helpers for DupSlasher.

Text is split on a fixed *delimiter table*: every byte value in ``0..255`` that
is not ASCII alphanumeric.  Code points above 255 are always delimiters, which
keeps ``str`` tokenisation identical to splitting the UTF-8 encoded bytes (all
bytes of a multi-byte sequence are >= 0x80 and therefore delimiters).
"""
from __future__ import annotations

import re
from typing import Iterable, Iterator, Tuple, Union

# -----------------------------------------------------------
# Delimiter table
# -----------------------------------------------------------

_BYTE_RANGE = 256


def build_delimiter_table(delimiters: Iterable[str] | None = None) -> Tuple[bool, ...]:
    """Return a 256-entry table where ``table[c]`` is *True* for delimiters.

    With no *delimiters* the table marks every byte that is not ASCII
    alphanumeric.
    """
    if delimiters is None:
        return tuple(not bytes([c]).isalnum() for c in range(_BYTE_RANGE))
    chars = set(delimiters)
    for ch in chars:
        if len(ch) != 1 or ord(ch) >= _BYTE_RANGE:
            raise ValueError(f"Delimiter must be a single character below U+0100: {ch!r}")
    return tuple(chr(c) in chars for c in range(_BYTE_RANGE))


DELIMITER_TABLE: Tuple[bool, ...] = build_delimiter_table()

# Characters that are delimiters under the default table.
NONALNUM: frozenset[str] = frozenset(chr(c) for c in range(_BYTE_RANGE) if DELIMITER_TABLE[c])


def _token_pattern(table: Tuple[bool, ...]) -> re.Pattern[str] | None:
    keep = "".join(re.escape(chr(c)) for c in range(_BYTE_RANGE) if not table[c])
    if not keep:
        return None
    return re.compile(f"[{keep}]+")


# -----------------------------------------------------------
# Tokenizer
# -----------------------------------------------------------


class TokenStream:
    """Restartable view over the tokens of one text.

    Every call to :pyfunc:`iter` starts again from the beginning of the text;
    a single iterator is consumed left to right and cannot be rewound.
    """

    __slots__ = ("_tokenizer", "_text")

    def __init__(self, tokenizer: "Tokenizer", text: str) -> None:
        self._tokenizer = tokenizer
        self._text = text

    def __iter__(self) -> Iterator[str]:
        return self._tokenizer.tokens(self._text)

    def __repr__(self) -> str:
        return f"TokenStream({self._text[:40]!r})"


class Tokenizer:
    """Split text into non-empty tokens on a fixed delimiter table."""

    def __init__(self, delimiters: Iterable[str] | None = None) -> None:
        self.table = DELIMITER_TABLE if delimiters is None else build_delimiter_table(delimiters)
        self._pattern = _token_pattern(self.table)

    def is_delimiter(self, ch: str) -> bool:
        code = ord(ch)
        return code >= _BYTE_RANGE or self.table[code]

    def tokens(self, text: Union[str, bytes]) -> Iterator[str]:
        """Lazily yield the tokens of *text* from left to right.

        Runs of consecutive delimiters are skipped, so no token is ever empty.
        """
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        if self._pattern is None:
            return iter(())
        return (m.group() for m in self._pattern.finditer(text))

    def split(self, text: Union[str, bytes]) -> TokenStream:
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        return TokenStream(self, text)


_DEFAULT = Tokenizer()


def tokenize(text: Union[str, bytes]) -> Iterator[str]:
    """Tokenise *text* with the default (non-alphanumeric) delimiter table."""
    return _DEFAULT.tokens(text)
