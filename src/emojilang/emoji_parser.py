"""
EmojiLang Parser

Parses EmojiLang tokens into an abstract syntax tree rooted at a `program` node.

The parser is a single-pass recursive-descent parser that pulls tokens from the
lexer on demand and only ever buffers the current token. The binary operator
levels are handled by one precedence-climbing routine driven by
`BINARY_PRECEDENCE`; everything else has its own rule.

Supported Constructs
--------------------
- Statements:
    * Blocks: `{ stmt ... }`
    * Dataflow definitions: `expr => name`
    * Bare expressions
- Expressions, loosest to tightest:
    1. Conditional `cond ?? then :: else` (right-associative)
    2. `||`   3. `&&`   4. `== != < > <= >=`   5. `+ -`   6. `* / %` (all left-associative)
    7. Prefix `!` `-`, strategy prefixes `~~` `$$` `##`, iteration `@@ coll >> transform`
    8. Postfix chains: call `f(a, b)`, index `a[i]`, slice `a[s:e:st]`, member `a.b`
    9. Primaries: identifiers, numbers, strings, booleans, `#[...]`, `#{k: v}`, `( expr )`

Entry Points
------------
- `parse(tokens)`: Parse a token iterable into a program node.
- `parse_source(text)`: Tokenize and parse a source string.
- `Parser.parse_statement()` / `Parser.parse_expression()`: Parse one construct.

Raises
------
ParseError
    On the first token that does not fit the grammar. No recovery is attempted
    and no partial tree is returned.
LexError
    Propagated from the lexer when tokens are pulled from `tokenize()`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from emojilang.emoji_ast import ASTNode
from emojilang.emoji_constants import (
    BINARY_PRECEDENCE,
    LEVEL_OR,
    LITERAL_TOKENS,
    PREFIX_TOKENS,
    PRIMARY_START_TOKENS,
    token_spellings,
)
from emojilang.emoji_errors import ParseError
from emojilang.emoji_lexer import Token, tokenize

logger = logging.getLogger(__name__)

_TOKEN_DESCRIPTIONS = {
    "IDENT": "identifier",
    "NUMBER": "number",
    "STRING": "string",
    "BOOLEAN": "boolean",
    "EOF": "end of input",
}

Start = tuple[int, int, int]


def describe_expected(type_: str) -> str:
    """Human-readable name of a token type for `ParseError.expected`."""
    if type_ in token_spellings:
        return repr(token_spellings[type_])
    return _TOKEN_DESCRIPTIONS.get(type_, type_)


class Parser:
    """
    EmojiLang Parser Class

    Transforms a stream of lexical tokens into an AST. Tokens are pulled lazily
    from the given iterable; a missing trailing EOF token is synthesized.

    Attributes
    ----------
    previous : Token | None
        The most recently consumed token, used to close node spans.

    Methods
    -------
    parse() -> ASTNode
        Parse a complete program.
    parse_statement() -> ASTNode
        Parse a block, dataflow definition or expression statement.
    parse_expression(left=None) -> ASTNode
        Parse a full expression, optionally continuing from an already parsed operand.
    parse_binary(min_level, left=None) -> ASTNode
        Precedence climbing over the binary operator table.
    parse_unary() -> ASTNode
        Parse a run of prefix and strategy operators around an operand.
    parse_prefix_operand() -> ASTNode
        Parse an iteration expression or a postfix chain.
    parse_postfix(base=None) -> ASTNode
        Parse a primary followed by any chain of call/index/slice/member suffixes.
    parse_primary() -> ASTNode
        Parse an atom, literal constructor or grouped expression.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = iter(tokens)
        self.previous: Token | None = None
        self._current = self._pull()

    # ------------------------------------------------------------------
    # Token cursor
    # ------------------------------------------------------------------

    def _pull(self) -> Token:
        tok = next(self._tokens, None)
        if tok is None:
            last = self.previous
            if last is None:
                return Token("EOF", "", 1, 1, 0)
            newlines = last.value.count("\n")
            if newlines:
                col = len(last.value) - last.value.rfind("\n")
            else:
                col = last.col + len(last.value)
            return Token("EOF", "", last.line + newlines, col, last.end)
        return tok

    def current(self) -> Token:
        return self._current

    def advance(self) -> Token:
        """Consumes the current token and returns it."""
        tok = self._current
        self.previous = tok
        if tok.type != "EOF":
            self._current = self._pull()
        return tok

    def check(self, *types: str) -> bool:
        return self._current.type in types

    def match(self, *types: str) -> Token | None:
        if self._current.type in types:
            return self.advance()
        return None

    def expect(self, *types: str) -> Token:
        tok = self.match(*types)
        if tok is None:
            raise self.error(tuple(describe_expected(t) for t in types))
        return tok

    def error(self, expected: tuple[str, ...], reason: str | None = None) -> ParseError:
        err = ParseError(expected, self._current, reason)
        logger.debug("parse error: %s", err)
        return err

    # ------------------------------------------------------------------
    # Node construction
    # ------------------------------------------------------------------

    @staticmethod
    def start_of(item: Token | ASTNode) -> Start:
        if isinstance(item, Token):
            return item.line, item.col, item.offset
        return item.line, item.col, item.span[0]

    def node(
        self,
        kind: str,
        start: Start,
        value: str | ASTNode | None = None,
        children: list[ASTNode] | None = None,
    ) -> ASTNode:
        end = self.previous.end if self.previous is not None else start[2]
        return ASTNode(
            kind, value, children, line=start[0], col=start[1], span=(start[2], end)
        )

    def absent(self) -> ASTNode:
        """Marker for an omitted slice bound, positioned at the current token."""
        tok = self._current
        return ASTNode("absent", line=tok.line, col=tok.col, span=(tok.offset, tok.offset))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse(self) -> ASTNode:
        """Parse a full program and return its `program` node."""
        statements: list[ASTNode] = []
        try:
            while not self.check("EOF"):
                statements.append(self.parse_statement())
        except RecursionError:
            raise self.error(("expression",), "expression nested too deeply") from None
        eof = self._current
        logger.debug("parsed %d top-level statements", len(statements))
        return ASTNode("program", None, statements, line=1, col=1, span=(0, eof.offset))

    def parse_statement(self) -> ASTNode:
        """Parse a block, a dataflow definition (`expr => name`) or an expression."""
        if self.check("LBRACE"):
            return self.parse_block()

        expr = self.parse_expression()
        if self.match("FLOW"):
            name_tok = self.expect("IDENT")
            name = self.node("identifier", self.start_of(name_tok), name_tok.value)
            return self.node("dataflow", self.start_of(expr), expr, [name])
        return expr

    def parse_block(self) -> ASTNode:
        """Parse a `{}`-enclosed sequence of statements."""
        open_tok = self.expect("LBRACE")
        statements: list[ASTNode] = []
        while not self.check("RBRACE", "EOF"):
            statements.append(self.parse_statement())
        self.expect("RBRACE")
        return self.node("block", self.start_of(open_tok), None, statements)

    # ------------------------------------------------------------------
    # Expression ladder
    # ------------------------------------------------------------------

    def parse_expression(self, left: ASTNode | None = None) -> ASTNode:
        """Parse a conditional expression or anything that binds tighter.

        The condition stops at the logical-or level; both branches are full
        expressions, which makes chained conditionals nest to the right.
        """
        condition = self.parse_binary(LEVEL_OR, left)
        if not self.match("COND"):
            return condition
        consequence = self.parse_expression()
        self.expect("ALT")
        alternative = self.parse_expression()
        return self.node(
            "conditional", self.start_of(condition), None, [condition, consequence, alternative]
        )

    def parse_binary(self, min_level: int, left: ASTNode | None = None) -> ASTNode:
        """Precedence climbing over every binary operator at or above `min_level`."""
        if left is None:
            left = self.parse_unary()
        while True:
            entry = BINARY_PRECEDENCE.get(self._current.type)
            if entry is None or entry[0] < min_level:
                return left
            level, assoc, kind = entry
            op_tok = self.advance()
            right = self.parse_binary(level + 1 if assoc == "left" else level)
            left = self.node(kind, self.start_of(left), op_tok.value, [left, right])

    def parse_unary(self) -> ASTNode:
        prefixes: list[Token] = []
        while self._current.type in PREFIX_TOKENS:
            prefixes.append(self.advance())

        expr = self.parse_prefix_operand()
        for tok in reversed(prefixes):
            expr = self.node(PREFIX_TOKENS[tok.type], self.start_of(tok), tok.value, [expr])
        return expr

    def parse_prefix_operand(self) -> ASTNode:
        tok = self._current
        if tok.type == "ITER":
            self.advance()
            collection = self.parse_postfix()
            self.expect("PIPE")
            transform = self.parse_unary()
            return self.node("iteration", self.start_of(tok), None, [collection, transform])

        return self.parse_postfix()

    # ------------------------------------------------------------------
    # Postfix chains
    # ------------------------------------------------------------------

    def parse_postfix(self, base: ASTNode | None = None) -> ASTNode:
        expr = base if base is not None else self.parse_primary()
        while True:
            if self.match("LPAREN"):
                args: list[ASTNode] = []
                if not self.check("RPAREN"):
                    args.append(self.parse_expression())
                    while self.match("COMMA"):
                        args.append(self.parse_expression())
                self.expect("RPAREN")
                expr = self.node("call", self.start_of(expr), expr, args)
            elif self.check("LBRACK"):
                expr = self.parse_subscript(expr)
            elif self.match("DOT"):
                member = self.expect("IDENT")
                expr = self.node("member", self.start_of(expr), member.value, [expr])
            else:
                return expr

    def parse_subscript(self, obj: ASTNode) -> ASTNode:
        """Parse `[index]` or `[start:end(:step)]` following `obj`.

        Slice bounds must be primaries, so a leading primary is parsed on its own
        first; if a `:` follows it becomes the slice start, otherwise parsing
        resumes with it as the left-most operand of the index expression.
        """
        self.expect("LBRACK")

        if self.check("COLON", "ALT"):
            return self.parse_slice(obj, self.absent())

        if self.check(*PRIMARY_START_TOKENS):
            first = self.parse_primary()
            if self.check("COLON", "ALT"):
                return self.parse_slice(obj, first)
            index = self.parse_expression(self.parse_postfix(first))
        else:
            index = self.parse_expression()

        self.expect("RBRACK")
        return self.node("index", self.start_of(obj), None, [obj, index])

    def parse_slice(self, obj: ASTNode, start: ASTNode) -> ASTNode:
        # `a[::2]` and `a[1::2]` arrive with both colons lexed as one `::` token.
        if self.check("ALT"):
            end = self.absent()
            self.advance()
            step = self.parse_slice_bound()
        else:
            self.expect("COLON")
            end = self.parse_slice_bound()
            step = self.parse_slice_bound() if self.match("COLON") else self.absent()
        self.expect("RBRACK")
        return self.node("slice", self.start_of(obj), None, [obj, start, end, step])

    def parse_slice_bound(self) -> ASTNode:
        if self.check(*PRIMARY_START_TOKENS):
            return self.parse_primary()
        return self.absent()

    # ------------------------------------------------------------------
    # Primaries
    # ------------------------------------------------------------------

    def parse_primary(self) -> ASTNode:
        tok = self._current
        if tok.type in LITERAL_TOKENS:
            self.advance()
            value = tok.value[1:-1] if tok.type == "STRING" else tok.value
            return self.node(LITERAL_TOKENS[tok.type], self.start_of(tok), value)
        if tok.type == "ARRAY_OPEN":
            return self.parse_array()
        if tok.type == "MAP_OPEN":
            return self.parse_map()
        if self.match("LPAREN"):
            inner = self.parse_expression()
            self.expect("RPAREN")
            return inner
        raise self.error(("expression",))

    def parse_array(self) -> ASTNode:
        """Parse `#[e, e, ...]`; empty and trailing-comma forms are allowed."""
        open_tok = self.expect("ARRAY_OPEN")
        elements: list[ASTNode] = []
        while not self.check("RBRACK"):
            elements.append(self.parse_expression())
            if not self.match("COMMA"):
                break
        self.expect("RBRACK")
        return self.node("array", self.start_of(open_tok), None, elements)

    def parse_map(self) -> ASTNode:
        """Parse `#{key: value, ...}` with identifier or string keys."""
        open_tok = self.expect("MAP_OPEN")
        entries: list[ASTNode] = []
        while not self.check("RBRACE"):
            key_tok = self.expect("IDENT", "STRING")
            if key_tok.type == "STRING":
                key = self.node("string", self.start_of(key_tok), key_tok.value[1:-1])
            else:
                key = self.node("identifier", self.start_of(key_tok), key_tok.value)
            self.expect("COLON")
            value = self.parse_expression()
            entries.append(self.node("map_entry", self.start_of(key_tok), value, [key]))
            if not self.match("COMMA"):
                break
        self.expect("RBRACE")
        return self.node("map", self.start_of(open_tok), None, entries)


def parse(tokens: Iterable[Token]) -> ASTNode:
    """Parse a token iterable (list or lazy `tokenize()` stream) into a program node."""
    return Parser(tokens).parse()


def parse_source(source: str) -> ASTNode:
    """Tokenize and parse EmojiLang source text."""
    return Parser(tokenize(source)).parse()


__all__ = ["Parser", "describe_expected", "parse", "parse_source"]
