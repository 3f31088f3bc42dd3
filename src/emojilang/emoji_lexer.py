"""
Lexical analyzer for the EmojiLang expression language.

This module provides core components for converting raw source code into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, exact text, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    tokenize: Lazily yields the tokens of a source string, ending with EOF.

Features:
    - Skips whitespace, backslash-newline continuations and comments
      (`// ...` to end of line, `/* ... */` non-nested)
    - Longest-match recognition of symbolic operators (`::` before `:`, `#[` before `#`)
    - Recognizes:
        * Identifiers and the `true`/`false` keywords
        * Numbers (integer and single-fraction decimal, unsigned)
        * Strings delimited by `"` or `'` (no escape processing)
        * Operators and punctuation

Raises:
    LexError: On unterminated strings or block comments, unrecognized characters,
        and lone `$`, `~`, `#`, `@` (and similar) that do not form an operator.

Example:
    >>> [tok.type for tok in tokenize("x + 1 => y")]
    ['IDENT', 'PLUS', 'NUMBER', 'FLOW', 'IDENT', 'EOF']
"""

import logging
from collections.abc import Iterator
from typing import Any

from emojilang.emoji_constants import (
    MAX_OPERATOR_LENGTH,
    keyword_tokens,
    lone_prefix_hints,
    operator_tokens,
)
from emojilang.emoji_errors import LexError, SourcePosition

logger = logging.getLogger(__name__)


# JavaScript `\s`: Unicode whitespace minus the C0 separators and NEL, plus BOM.
_NOT_WHITESPACE = frozenset("\x1c\x1d\x1e\x1f\x85")


def _is_whitespace(ch: str) -> bool:
    return ch == "\ufeff" or (ch.isspace() and ch not in _NOT_WHITESPACE)


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ident_part(ch: str) -> bool:
    return _is_ident_start(ch) or ("0" <= ch <= "9")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.position)

    def mark(self) -> SourcePosition:
        """Returns the current location as a SourcePosition."""
        return SourcePosition(self.position, self.line, self.column)

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in EmojiLang.

    Attributes:
        type (str): The token type (e.g. 'IDENT', 'NUMBER', 'FLOW', 'EOF').
        value (str): The exact source text of the token (strings keep their quotes).
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
        offset (int): The 0-based character offset where the token starts.
    """

    __slots__ = ("type", "value", "line", "col", "offset")

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0, offset: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col
        self.offset = offset

    @property
    def end(self) -> int:
        """Offset one past the last character of the token."""
        return self.offset + len(self.value)

    @property
    def position(self) -> SourcePosition:
        return SourcePosition(self.offset, self.line, self.col)

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "offset"):
            raise AttributeError("Token is immutable")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.offset == other.offset
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col, self.offset))


class Lexer:
    """Lexical analyzer for EmojiLang.

    The Lexer takes a CharacterStream and converts it into a stream of Token objects,
    one per call to `next_token()`. Once the input is exhausted every further call
    returns an EOF token.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def error(self, reason: str, at: SourcePosition | None = None) -> LexError:
        at = at or self.stream.mark()
        logger.debug("lex error: %s at offset %d", reason, at.offset)
        return LexError(reason, at)

    def skip_whitespace(self) -> None:
        """Skips whitespace, line continuations and comments."""
        while not self.stream.end_of_file():
            ch = self.peek()
            if _is_whitespace(ch):
                self.advance()
            elif ch == "\\":
                self.skip_continuation()
            elif self.stream.startswith("//"):
                self.skip_line_comment()
            elif self.stream.startswith("/*"):
                self.skip_block_comment()
            else:
                break

    def skip_continuation(self) -> None:
        """Consumes a backslash followed by an optional CR and a newline."""
        start = self.stream.mark()
        if self.peek(1) == "\n":
            width = 2
        elif self.peek(1) == "\r" and self.peek(2) == "\n":
            width = 3
        else:
            raise self.error("stray backslash", start)
        for _ in range(width):
            self.advance()

    def skip_line_comment(self) -> None:
        """Skips a `//` comment; a backslash escapes the next character, newline included."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            if self.advance() == "\\" and not self.stream.end_of_file():
                if self.advance() == "\r" and self.peek() == "\n":
                    self.advance()

    def skip_block_comment(self) -> None:
        """Skips up to and including the first `*/`."""
        start = self.stream.mark()
        self.advance()
        self.advance()
        while not self.stream.end_of_file():
            if self.stream.startswith("*/"):
                self.advance()
                self.advance()
                return
            self.advance()
        raise self.error("unterminated block comment", start)

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        start = self.stream.mark()
        max_token = None
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in operator_tokens:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(operator_tokens[max_token], max_token, start.line, start.col, start.offset)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: If a malformed token is encountered.
        """
        self.skip_whitespace()

        start = self.stream.mark()
        line, col, offset = start.line, start.col, start.offset

        if self.stream.end_of_file():
            return Token("EOF", "", line, col, offset)

        ch = self.peek()

        # 1. Identifier or keyword
        if _is_ident_start(ch):
            ident = ""
            while _is_ident_part(self.peek()):
                ident += self.advance()
            return Token(keyword_tokens.get(ident, "IDENT"), ident, line, col, offset)

        # 2. Number; the fraction needs at least one digit after the dot
        if _is_digit(ch):
            num = ""
            while _is_digit(self.peek()):
                num += self.advance()
            if self.peek() == "." and _is_digit(self.peek(1)):
                num += self.advance()
                while _is_digit(self.peek()):
                    num += self.advance()
            return Token("NUMBER", num, line, col, offset)

        # 3. String
        if ch in ('"', "'"):
            text = self.advance()
            while not self.stream.end_of_file() and self.peek() != ch:
                text += self.advance()
            if self.stream.end_of_file():
                raise self.error("unterminated string", start)
            text += self.advance()
            return Token("STRING", text, line, col, offset)

        # 4. Compound or symbolic operator
        token = self.match_operator()
        if token:
            return token

        # 5. Lone prefix of a two-character operator, or unknown character
        if ch in lone_prefix_hints:
            options = " or ".join(repr(op) for op in lone_prefix_hints[ch])
            raise self.error(f"{ch!r} must be part of {options}", start)
        raise self.error(f"unrecognized character {ch!r}", start)


def tokenize(source: str) -> Iterator[Token]:
    """Lazily tokenizes `source`, yielding every token up to and including EOF.

    Each call starts again from the beginning of the source.

    Raises:
        LexError: When the lexer reaches text it cannot tokenize.
    """
    lexer = Lexer(CharacterStream(source))
    while True:
        tok = lexer.next_token()
        yield tok
        if tok.type == "EOF":
            return


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
