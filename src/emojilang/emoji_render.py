"""
Provides the `Renderer` class and emitter interface for turning EmojiLang ASTs into text.

Classes and Features:
    - Emitter (Protocol): Interface for all output emitters. Requires `emit_program`
      and `get_output`.
    - SourceEmitter: Pretty-prints the tree back to EmojiLang source.
    - SExprEmitter: Tree-sitter style s-expression dump.
    - JSONEmitter: JSON dump of `ASTNode.to_dict()`.
    - Renderer: Picks an emitter by target name and feeds it a `program` node.

Example:
    >>> Renderer("source").render(parse_source("x+1=>y"))
    'x + 1 => y'

Raises:
    ValueError: If the target is not supported.
    TypeError: If the tree handed to `render` is not a program node.
"""

import logging
from typing import Protocol

from emojilang.emitters.json_emitter import JSONEmitter
from emojilang.emitters.sexpr_emitter import SExprEmitter
from emojilang.emitters.source_emitter import SourceEmitter
from emojilang.emoji_ast import ASTNode

logger = logging.getLogger(__name__)


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all EmojiLang emitters.

    Methods:
        emit_program(node): Consumes a whole `program` node.
        get_output(): Returns the complete emitted text as a string.
    """

    def emit_program(self, node: ASTNode) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


EmitterType = type[Emitter]
"""Alias for a concrete Emitter class type."""

EMITTERS: dict[str, EmitterType] = {
    "source": SourceEmitter,
    "emojilang": SourceEmitter,
    "sexpr": SExprEmitter,
    "json": JSONEmitter,
}


class Renderer:
    """Dispatches an EmojiLang program to the emitter for an output target.

    Attributes:
        target (str): Normalised target name.
        emitter (Emitter): The selected emitter instance.
    """

    def __init__(self, target: str = "source") -> None:
        """Initializes the renderer with the desired output target.

        Args:
            target: One of "source" (alias "emojilang"), "sexpr" or "json".

        Raises:
            ValueError: If the target is not supported.
        """
        target = target.lower()
        if target not in EMITTERS:
            raise ValueError(f"Unknown render target: {target!r}")
        self.target = target
        self.emitter: Emitter = EMITTERS[target]()

    def render(self, program: ASTNode) -> str:
        """Renders a parsed program.

        Raises:
            TypeError: If `program` is not a `program` ASTNode.
        """
        if not isinstance(program, ASTNode) or program.kind != "program":
            raise TypeError("Renderer expects the program node returned by the parser.")
        logger.debug("rendering %d statements as %s", len(program.children), self.target)
        self.emitter.emit_program(program)
        return self.emitter.get_output()


def render(program: ASTNode, target: str = "source") -> str:
    """Convenience wrapper around `Renderer(target).render(program)`."""
    return Renderer(target).render(program)


__all__ = ["EMITTERS", "Emitter", "Renderer", "render"]
