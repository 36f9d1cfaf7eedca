from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from ember_nav.models import Position, SourceRange


class Locatable(Protocol):
    """Anything the locator can descend: a range plus ordered children."""

    @property
    def range(self) -> SourceRange: ...

    def child_nodes(self) -> Sequence[Any]: ...


def compare(a: Position, b: Position) -> int:
    """Order positions by line, then character. Returns -1, 0 or 1."""
    if a.line != b.line:
        return -1 if a.line < b.line else 1
    if a.character != b.character:
        return -1 if a.character < b.character else 1
    return 0


@dataclass(frozen=True)
class ASTPath:
    """A focused node plus a link to the path of its parent."""

    node: Any
    parent: ASTPath | None = None

    @property
    def parent_node(self) -> Any | None:
        return self.parent.node if self.parent is not None else None

    @property
    def grandparent_node(self) -> Any | None:
        if self.parent is None or self.parent.parent is None:
            return None
        return self.parent.parent.node


def locate(tree: Locatable, position: Position) -> ASTPath | None:
    """Return the path to the deepest node whose range contains ``position``."""
    if not tree.range.contains(position):
        return None

    path = ASTPath(tree)
    while True:
        for child in path.node.child_nodes():
            if child.range.contains(position):
                path = ASTPath(child, path)
                break
        else:
            return path
