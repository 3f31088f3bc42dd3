"""
Error types raised by the EmojiLang lexer and parser.

Hierarchy:
    EmojiSyntaxError (SyntaxError)
    ├── LexError   - unterminated string/comment, unrecognized character,
    │                lone prefix of a two-character operator
    └── ParseError - unexpected token, missing required token, unexpected EOF

Both errors carry a `SourcePosition` pointing at the offending text and
format as ``"<reason> at line L, col C"``. Nothing is recovered: the first
error aborts the current `tokenize`/`parse` call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from emojilang.emoji_lexer import Token


class SourcePosition(NamedTuple):
    """A point in the source text.

    Attributes:
        offset (int): 0-based character offset.
        line (int): 1-based line number.
        col (int): 1-based column number.
    """

    offset: int
    line: int
    col: int


class EmojiSyntaxError(SyntaxError):
    """Base class for all EmojiLang lexing and parsing failures.

    Attributes:
        reason (str): Short description of what went wrong.
        position (SourcePosition): Where in the source the error was detected.
    """

    def __init__(self, reason: str, position: SourcePosition):
        self.reason = reason
        self.position = position
        super().__init__(f"{reason} at line {position.line}, col {position.col}")

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def col(self) -> int:
        return self.position.col


class LexError(EmojiSyntaxError):
    """Raised by the lexer when the source cannot be split into tokens."""


class ParseError(EmojiSyntaxError):
    """Raised by the parser when a token does not fit the grammar.

    Attributes:
        expected (tuple[str, ...]): Human-readable descriptions of acceptable tokens.
        found (Token): The token that was actually encountered.
    """

    def __init__(self, expected: tuple[str, ...], found: Token, reason: str | None = None):
        self.expected = expected
        self.found = found
        if reason is None:
            reason = f"expected {' or '.join(expected)}, got {describe_token(found)}"
        super().__init__(reason, found.position)


def describe_token(tok: Token) -> str:
    """Renders a token for use in an error message."""
    if tok.type == "EOF":
        return "end of input"
    return f"{tok.type} {tok.value!r}"


__all__ = ["EmojiSyntaxError", "LexError", "ParseError", "SourcePosition", "describe_token"]
