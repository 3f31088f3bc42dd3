"""
EmojiLang: lexer, parser and emitters for a small symbol-operator expression language.

    >>> from emojilang import parse_source, render
    >>> program = parse_source("~~$$x => y")
    >>> render(program, "sexpr")
    '(dataflow_definition value: (strategy_expression strategy: "~~" operand: (strategy_expression strategy: "$$" operand: (identifier "x"))) name: (identifier "y"))'
"""

from emojilang.emoji_ast import ASTNode
from emojilang.emoji_errors import EmojiSyntaxError, LexError, ParseError, SourcePosition
from emojilang.emoji_lexer import CharacterStream, Lexer, Token, tokenize
from emojilang.emoji_parser import Parser, parse, parse_source
from emojilang.emoji_render import Renderer, render

__all__ = [
    "ASTNode",
    "CharacterStream",
    "EmojiSyntaxError",
    "LexError",
    "Lexer",
    "ParseError",
    "Parser",
    "Renderer",
    "SourcePosition",
    "Token",
    "parse",
    "parse_source",
    "render",
    "tokenize",
]
