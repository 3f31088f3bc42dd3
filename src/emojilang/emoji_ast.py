"""
Defines the abstract syntax tree (AST) node structure for EmojiLang.

Classes:
    ASTNode:
        Represents a node in the syntax tree, produced by the parser and consumed
        by the emitters. A closed set of node kinds shares this one class; the
        grammar's field names (`left`, `condition`, `start`, ...) are resolved
        through `FIELD_LAYOUT` and read as plain attributes.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python
        dictionaries, suitable for JSON output or debugging.

Each ASTNode tracks:
    kind (str): The syntactic construct (e.g. "additive", "call", "slice").
    value (str | ASTNode, optional): Operator or literal text, or a child node
        (the callee of a call, the value of a dataflow definition or map entry).
    children (list[ASTNode]): Remaining child nodes, in grammar order.
    line (int), col (int): Start position for error messages.
    span (tuple[int, int]): Start and end character offsets in the source.

Example:
    node = ASTNode("additive", "+", [ASTNode("identifier", "x"), ASTNode("number", "1")])
    node.left.value  # "x"
"""

from collections.abc import Iterator
from typing import Any, TypedDict, Union

VALUE = "value"
ALL = "children"

FIELD_LAYOUT: dict[str, dict[str, int | str]] = {
    "program": {"statements": ALL},
    "block": {"statements": ALL},
    "dataflow": {"value": VALUE, "name": 0},
    "conditional": {"condition": 0, "consequence": 1, "alternative": 2},
    "logical_or": {"operator": VALUE, "left": 0, "right": 1},
    "logical_and": {"operator": VALUE, "left": 0, "right": 1},
    "comparison": {"operator": VALUE, "left": 0, "right": 1},
    "additive": {"operator": VALUE, "left": 0, "right": 1},
    "multiplicative": {"operator": VALUE, "left": 0, "right": 1},
    "unary": {"operator": VALUE, "operand": 0},
    "strategy": {"strategy": VALUE, "operand": 0},
    "iteration": {"collection": 0, "transform": 1},
    "call": {"function": VALUE, "arguments": ALL},
    "index": {"object": 0, "index": 1},
    "slice": {"object": 0, "start": 1, "end": 2, "step": 3},
    "member": {"object": 0, "member": VALUE},
    "array": {"elements": ALL},
    "map": {"entries": ALL},
    "map_entry": {"key": 0, "value": VALUE},
}

# Kinds whose `value` node precedes their children in the source text.
VALUE_FIRST = frozenset({"call", "dataflow"})


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "call", "slice").
        value (Any): The node's value, which may be a string or nested ASTDict.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        span (list[int]): Start and end offsets of the node in the source.
        children (list[ASTDict]): Child nodes in grammar order.
    """

    kind: str
    value: Any
    line: int
    col: int
    span: list[int]
    children: list["ASTDict"]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for EmojiLang.

    Args:
        kind (str): The type of node (e.g., "conditional", "member", "number").
        value (Union[str, ASTNode], optional): Operator/literal text or a child node.
        children (list[ASTNode], optional): Child nodes in grammar order.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        span (tuple[int, int]): Source offsets covered by the node (default (0, 0)).

    Field access:
        Attribute lookups that are not real attributes are resolved through
        `FIELD_LAYOUT[kind]`, so `node.condition` on a conditional returns
        `node.children[0]` and `node.operator` on a binary node returns `node.value`.
        Unknown fields raise AttributeError.
    """

    def __init__(
        self,
        kind: str,
        value: Union[str, "ASTNode"] | None = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        span: tuple[int, int] = (0, 0),
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col
        self.span = span

    def __getattr__(self, name: str) -> Any:
        layout = FIELD_LAYOUT.get(self.__dict__.get("kind", ""), {})
        if name.startswith("_") or name not in layout:
            raise AttributeError(
                f"{type(self).__name__} of kind {self.__dict__.get('kind')!r} has no field {name!r}"
            )
        slot = layout[name]
        if slot == VALUE:
            return self.value
        if slot == ALL:
            return self.children
        return self.children[int(slot)]

    def fields(self) -> dict[str, Any]:
        """Returns the grammar fields of this node by name."""
        return {name: getattr(self, name) for name in FIELD_LAYOUT.get(self.kind, {})}

    def is_absent(self) -> bool:
        """True for the marker standing in for an omitted slice bound."""
        return self.kind == "absent"

    def iter_children(self) -> Iterator["ASTNode"]:
        """Yields direct child nodes in source order."""
        value_node = self.value if isinstance(self.value, ASTNode) else None
        if value_node is not None and self.kind in VALUE_FIRST:
            yield value_node
        yield from self.children
        if value_node is not None and self.kind not in VALUE_FIRST:
            yield value_node

    def walk(self) -> Iterator["ASTNode"]:
        """Yields this node and all descendants in pre-order."""
        yield self
        for child in self.iter_children():
            yield from child.walk()

    def shape(self) -> tuple[Any, ...]:
        """Returns a nested tuple of kinds and values, without positions."""
        val: Any = self.value.shape() if isinstance(self.value, ASTNode) else self.value
        return (self.kind, val, tuple(c.shape() for c in self.children))

    def same_shape(self, other: "ASTNode") -> bool:
        """Structural equality that ignores source positions."""
        return isinstance(other, ASTNode) and self.shape() == other.shape()

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.span == other.span
            and self.children == other.children
        )

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> ASTDict:
        val: Any = self.value
        if isinstance(val, ASTNode):
            val = val.to_dict()

        return {
            "kind": self.kind,
            "value": val,
            "line": self.line,
            "col": self.col,
            "span": list(self.span),
            "children": [c.to_dict() for c in self.children],
        }


__all__ = ["ALL", "ASTDict", "ASTNode", "FIELD_LAYOUT", "VALUE"]
