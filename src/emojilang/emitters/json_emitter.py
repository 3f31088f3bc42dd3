"""Serializes an EmojiLang program to JSON via `ASTNode.to_dict()`."""

import json

from emojilang.emoji_ast import ASTNode


class JSONEmitter:
    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent
        self.output = ""

    def get_output(self) -> str:
        return self.output

    def emit_program(self, node: ASTNode) -> None:
        self.output = json.dumps(node.to_dict(), indent=self.indent)


__all__ = ["JSONEmitter"]
