"""
Renders EmojiLang AST nodes as tree-sitter style s-expressions.

Node kinds are printed under their grammar rule names (`additive` becomes
`additive_expression`, `program` becomes `source_file`), fields are labelled,
leaf text and operators are quoted, and absent slice bounds are omitted:

    (source_file (dataflow_definition
      value: (additive_expression left: (identifier "x") operator: "+" right: (number "1"))
      name: (identifier "y")))

(shown wrapped here; the emitter writes one line per top-level statement).
"""

import json

from emojilang.emoji_ast import ASTNode

RULE_NAMES: dict[str, str] = {
    "program": "source_file",
    "block": "block",
    "dataflow": "dataflow_definition",
    "conditional": "conditional_expression",
    "logical_or": "logical_or_expression",
    "logical_and": "logical_and_expression",
    "comparison": "comparison_expression",
    "additive": "additive_expression",
    "multiplicative": "multiplicative_expression",
    "unary": "unary_expression",
    "strategy": "strategy_expression",
    "iteration": "iteration_expression",
    "call": "call_expression",
    "index": "index_expression",
    "slice": "slice_expression",
    "member": "member_expression",
    "identifier": "identifier",
    "number": "number",
    "string": "string",
    "boolean": "boolean",
    "array": "array_literal",
    "map": "map_literal",
    "map_entry": "map_entry",
}

# Labelled fields in source order; kinds missing here list their children unlabelled.
SOURCE_FIELDS: dict[str, tuple[str, ...]] = {
    "dataflow": ("value", "name"),
    "conditional": ("condition", "consequence", "alternative"),
    "logical_or": ("left", "operator", "right"),
    "logical_and": ("left", "operator", "right"),
    "comparison": ("left", "operator", "right"),
    "additive": ("left", "operator", "right"),
    "multiplicative": ("left", "operator", "right"),
    "unary": ("operator", "operand"),
    "strategy": ("strategy", "operand"),
    "iteration": ("collection", "transform"),
    "index": ("object", "index"),
    "slice": ("object", "start", "end", "step"),
    "member": ("object", "member"),
    "map_entry": ("key", "value"),
}

LEAF_KINDS = frozenset({"identifier", "number", "string", "boolean"})


class SExprEmitter:
    """Emits one s-expression line per top-level statement of a program.

    Attributes:
        lines (list[str]): Accumulated output lines.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def emit_program(self, node: ASTNode) -> None:
        if not node.children:
            self.lines.append(f"({RULE_NAMES['program']})")
            return
        for stmt in node.children:
            self.lines.append(self.emit(stmt))

    def emit(self, node: ASTNode) -> str:
        """Returns the s-expression for a single node and its descendants."""
        if node.kind not in RULE_NAMES:
            raise NotImplementedError(
                f"No s-expression rule for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
        name = RULE_NAMES[node.kind]
        if node.kind in LEAF_KINDS:
            return f"({name} {json.dumps(node.value)})"
        if node.kind == "call":
            return self.emit_call(node)

        parts = [name]
        if node.kind in SOURCE_FIELDS:
            for field in SOURCE_FIELDS[node.kind]:
                value = getattr(node, field)
                if isinstance(value, ASTNode):
                    if not value.is_absent():
                        parts.append(f"{field}: {self.emit(value)}")
                elif node.kind == "member":
                    parts.append(f"{field}: (identifier {json.dumps(value)})")
                else:
                    parts.append(f"{field}: {json.dumps(value)}")
        else:
            parts.extend(self.emit(child) for child in node.children)
        return f"({' '.join(parts)})"

    def emit_call(self, node: ASTNode) -> str:
        parts = ["call_expression", f"function: {self.emit(node.function)}"]
        if node.arguments:
            args = " ".join(self.emit(arg) for arg in node.arguments)
            parts.append(f"(argument_list {args})")
        return f"({' '.join(parts)})"


__all__ = ["RULE_NAMES", "SExprEmitter"]
