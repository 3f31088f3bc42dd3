"""
Token and precedence tables for the EmojiLang lexer, parser and emitters.

Tables:
    operator_tokens: Maps every operator/punctuation spelling to its token type.
    keyword_tokens: Words that are lexed as something other than an identifier.
    BINARY_PRECEDENCE: Binary operator token type -> (level, associativity, node kind).
    PREFIX_TOKENS: Unary and strategy prefix token types -> node kind.
    PRIMARY_START_TOKENS: Token types that can begin a primary expression.
    NODE_LEVELS: Binding level of each AST node kind, used by the source emitter.

Levels follow the expression ladder from loosest to tightest:
    1 conditional, 2 logical or, 3 logical and, 4 comparison,
    5 additive, 6 multiplicative, 7 unary/strategy/iteration, 8 postfix, 9 primary.
"""

from typing import Literal

Associativity = Literal["left", "right"]

operator_tokens: dict[str, str] = {
    # Two-character operators
    "=>": "FLOW",
    "??": "COND",
    "::": "ALT",
    "||": "OR",
    "&&": "AND",
    "==": "EQ",
    "!=": "NE",
    "<=": "LE",
    ">=": "GE",
    "~~": "LAZY",
    "$$": "GREEDY",
    "##": "RANDOM",
    "@@": "ITER",
    ">>": "PIPE",
    "#[": "ARRAY_OPEN",
    "#{": "MAP_OPEN",
    # Single-character operators and punctuation
    "<": "LT",
    ">": "GT",
    "!": "NOT",
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
    "%": "MOD",
    "(": "LPAREN",
    ")": "RPAREN",
    "[": "LBRACK",
    "]": "RBRACK",
    "{": "LBRACE",
    "}": "RBRACE",
    ",": "COMMA",
    ":": "COLON",
    ".": "DOT",
}

keyword_tokens: dict[str, str] = {
    "true": "BOOLEAN",
    "false": "BOOLEAN",
}

# Reverse lookup used for error messages and the emitters.
token_spellings: dict[str, str] = {v: k for k, v in operator_tokens.items()}

MAX_OPERATOR_LENGTH = max(len(op) for op in operator_tokens)

# Characters that only ever appear as the first half of a two-character operator.
lone_prefix_hints: dict[str, tuple[str, ...]] = {}
for _spelling in operator_tokens:
    if len(_spelling) == 2 and _spelling[0] not in operator_tokens:
        lone_prefix_hints.setdefault(_spelling[0], ())
        lone_prefix_hints[_spelling[0]] += (_spelling,)
del _spelling

LITERAL_TOKENS: dict[str, str] = {
    "IDENT": "identifier",
    "NUMBER": "number",
    "STRING": "string",
    "BOOLEAN": "boolean",
}

PRIMARY_START_TOKENS: frozenset[str] = frozenset(LITERAL_TOKENS) | {
    "ARRAY_OPEN",
    "MAP_OPEN",
    "LPAREN",
}

PREFIX_TOKENS: dict[str, str] = {
    "NOT": "unary",
    "SUB": "unary",
    "LAZY": "strategy",
    "GREEDY": "strategy",
    "RANDOM": "strategy",
}

LEVEL_CONDITIONAL = 1
LEVEL_OR = 2
LEVEL_AND = 3
LEVEL_COMPARISON = 4
LEVEL_ADDITIVE = 5
LEVEL_MULTIPLICATIVE = 6
LEVEL_UNARY = 7
LEVEL_POSTFIX = 8
LEVEL_PRIMARY = 9

BINARY_PRECEDENCE: dict[str, tuple[int, Associativity, str]] = {
    "OR": (LEVEL_OR, "left", "logical_or"),
    "AND": (LEVEL_AND, "left", "logical_and"),
    "EQ": (LEVEL_COMPARISON, "left", "comparison"),
    "NE": (LEVEL_COMPARISON, "left", "comparison"),
    "LT": (LEVEL_COMPARISON, "left", "comparison"),
    "GT": (LEVEL_COMPARISON, "left", "comparison"),
    "LE": (LEVEL_COMPARISON, "left", "comparison"),
    "GE": (LEVEL_COMPARISON, "left", "comparison"),
    "PLUS": (LEVEL_ADDITIVE, "left", "additive"),
    "SUB": (LEVEL_ADDITIVE, "left", "additive"),
    "MULT": (LEVEL_MULTIPLICATIVE, "left", "multiplicative"),
    "DIV": (LEVEL_MULTIPLICATIVE, "left", "multiplicative"),
    "MOD": (LEVEL_MULTIPLICATIVE, "left", "multiplicative"),
}

NODE_LEVELS: dict[str, int] = {
    "conditional": LEVEL_CONDITIONAL,
    "logical_or": LEVEL_OR,
    "logical_and": LEVEL_AND,
    "comparison": LEVEL_COMPARISON,
    "additive": LEVEL_ADDITIVE,
    "multiplicative": LEVEL_MULTIPLICATIVE,
    "unary": LEVEL_UNARY,
    "strategy": LEVEL_UNARY,
    "iteration": LEVEL_UNARY,
    "call": LEVEL_POSTFIX,
    "index": LEVEL_POSTFIX,
    "slice": LEVEL_POSTFIX,
    "member": LEVEL_POSTFIX,
    "identifier": LEVEL_PRIMARY,
    "number": LEVEL_PRIMARY,
    "string": LEVEL_PRIMARY,
    "boolean": LEVEL_PRIMARY,
    "array": LEVEL_PRIMARY,
    "map": LEVEL_PRIMARY,
}

INDENT_WIDTH = 4

__all__ = [
    "BINARY_PRECEDENCE",
    "INDENT_WIDTH",
    "LITERAL_TOKENS",
    "MAX_OPERATOR_LENGTH",
    "NODE_LEVELS",
    "PREFIX_TOKENS",
    "PRIMARY_START_TOKENS",
    "keyword_tokens",
    "lone_prefix_hints",
    "operator_tokens",
    "token_spellings",
]
