"""
Translates EmojiLang AST nodes back into EmojiLang source text.

This module defines the `SourceEmitter` class, the pretty-printer used by the
`Renderer` for the "source" target. Parsing the emitted text yields a tree of
the same shape as the one that was emitted.

Behavior:
    - One top-level statement per line; block bodies are indented.
    - Binary operators are surrounded by single spaces, prefix operators are attached.
    - Grouping is not stored in the tree, so parentheses are inserted wherever a
      child binds more loosely than the slot it sits in requires.
    - Maintains a code buffer (`lines`) which can be retrieved using `get_output()`.

Raises:
    - `NotImplementedError`: If an AST kind has no corresponding emitter.
    - `ValueError`: If a string literal contains both quote characters.
"""

from emojilang.emoji_ast import ASTNode
from emojilang.emoji_constants import (
    INDENT_WIDTH,
    LEVEL_CONDITIONAL,
    LEVEL_OR,
    LEVEL_POSTFIX,
    LEVEL_PRIMARY,
    LEVEL_UNARY,
    NODE_LEVELS,
)


class SourceEmitter:
    """Emits EmojiLang source code from AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted source.
        indent (int): Current block nesting depth.
        indent_width (int): Spaces per nesting level.
    """

    def __init__(self, indent_width: int = INDENT_WIDTH) -> None:
        self.lines: list[str] = []
        self.indent = 0
        self.indent_width = indent_width

    def indent_str(self) -> str:
        return " " * (self.indent_width * self.indent)

    def get_output(self) -> str:
        return "\n".join(self.lines)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def emit_program(self, node: ASTNode) -> None:
        for stmt in node.children:
            self._visit(stmt)

    def emit_block(self, node: ASTNode) -> None:
        if not node.children:
            self.lines.append(f"{self.indent_str()}{{}}")
            return
        self.lines.append(f"{self.indent_str()}{{")
        self.indent += 1
        for stmt in node.children:
            self._visit(stmt)
        self.indent -= 1
        self.lines.append(f"{self.indent_str()}}}")

    def emit_dataflow(self, node: ASTNode) -> None:
        value = self.emit_expr(node.value)
        self.lines.append(f"{self.indent_str()}{value} => {node.name.value}")

    def _visit(self, node: ASTNode) -> None:
        """Emits a statement: blocks and dataflow definitions, or a bare expression."""
        if node.kind in ("block", "dataflow"):
            getattr(self, f"emit_{node.kind}")(node)
            return
        self.lines.append(f"{self.indent_str()}{self.emit_expr(node)}")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def emit_expr(self, node: ASTNode, min_level: int = LEVEL_CONDITIONAL) -> str:
        """
        Emits an expression, parenthesized if it binds looser than `min_level`.

        Raises
        ------
        NotImplementedError
            If no emitter exists for the node kind.
        """
        method = getattr(self, f"emit_expr_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"No source emitter for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
        text: str = method(node)
        if NODE_LEVELS[node.kind] < min_level:
            return f"({text})"
        return text

    def emit_expr_identifier(self, node: ASTNode) -> str:
        return str(node.value)

    emit_expr_number = emit_expr_identifier
    emit_expr_boolean = emit_expr_identifier

    def emit_expr_string(self, node: ASTNode) -> str:
        text = str(node.value)
        if '"' not in text:
            return f'"{text}"'
        if "'" not in text:
            return f"'{text}'"
        raise ValueError(f"String literal cannot contain both quote characters: {text!r}")

    def emit_expr_conditional(self, node: ASTNode) -> str:
        condition = self.emit_expr(node.condition, LEVEL_OR)
        consequence = self.emit_expr(node.consequence)
        alternative = self.emit_expr(node.alternative)
        return f"{condition} ?? {consequence} :: {alternative}"

    def emit_expr_binary(self, node: ASTNode) -> str:
        level = NODE_LEVELS[node.kind]
        left = self.emit_expr(node.left, level)
        right = self.emit_expr(node.right, level + 1)
        return f"{left} {node.operator} {right}"

    emit_expr_logical_or = emit_expr_binary
    emit_expr_logical_and = emit_expr_binary
    emit_expr_comparison = emit_expr_binary
    emit_expr_additive = emit_expr_binary
    emit_expr_multiplicative = emit_expr_binary

    def emit_expr_unary(self, node: ASTNode) -> str:
        return f"{node.value}{self.emit_expr(node.operand, LEVEL_UNARY)}"

    emit_expr_strategy = emit_expr_unary

    def emit_expr_iteration(self, node: ASTNode) -> str:
        collection = self.emit_expr(node.collection, LEVEL_POSTFIX)
        transform = self.emit_expr(node.transform, LEVEL_UNARY)
        return f"@@ {collection} >> {transform}"

    def emit_expr_call(self, node: ASTNode) -> str:
        if not isinstance(node.function, ASTNode):
            raise TypeError("Expected ASTNode for call function")
        callee = self.emit_expr(node.function, LEVEL_POSTFIX)
        args = ", ".join(self.emit_expr(arg) for arg in node.arguments)
        return f"{callee}({args})"

    def emit_expr_index(self, node: ASTNode) -> str:
        obj = self.emit_expr(node.object, LEVEL_POSTFIX)
        return f"{obj}[{self.emit_expr(node.index)}]"

    def emit_slice_bound(self, node: ASTNode) -> str:
        if node.is_absent():
            return ""
        return self.emit_expr(node, LEVEL_PRIMARY)

    def emit_expr_slice(self, node: ASTNode) -> str:
        obj = self.emit_expr(node.object, LEVEL_POSTFIX)
        bounds = f"{self.emit_slice_bound(node.start)}:{self.emit_slice_bound(node.end)}"
        if not node.step.is_absent():
            bounds += f":{self.emit_slice_bound(node.step)}"
        return f"{obj}[{bounds}]"

    def emit_expr_member(self, node: ASTNode) -> str:
        return f"{self.emit_expr(node.object, LEVEL_POSTFIX)}.{node.member}"

    def emit_expr_array(self, node: ASTNode) -> str:
        return "#[" + ", ".join(self.emit_expr(e) for e in node.elements) + "]"

    def emit_expr_map(self, node: ASTNode) -> str:
        entries = []
        for entry in node.entries:
            key = self.emit_expr(entry.key)
            entries.append(f"{key}: {self.emit_expr(entry.value)}")
        return "#{" + ", ".join(entries) + "}"


__all__ = ["SourceEmitter"]
