from __future__ import annotations

from typing import cast

from pydantic import BaseModel, ConfigDict, Field
from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from ember_nav.core.languages import normalize_dialect
from ember_nav.models import Position, SourceRange


class ScriptNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    range: SourceRange
    named: bool = True
    field: str | None = None
    text: str | None = None
    children: list[ScriptNode] = Field(default_factory=list)

    def child_nodes(self) -> list[ScriptNode]:
        return self.children

    def named_children(self) -> list[ScriptNode]:
        return [child for child in self.children if child.named]

    def child_by_field(self, field: str) -> ScriptNode | None:
        for child in self.children:
            if child.field == field:
                return child
        return None


ScriptNode.model_rebuild()  # necessary for recursive types


def parse_script(text: str, dialect: str = "javascript") -> ScriptNode:
    """Parse JavaScript or TypeScript source into a :class:`ScriptNode` tree."""
    language = normalize_dialect(dialect)
    parser = get_parser(cast(SupportedLanguage, language))
    source_bytes = text.encode("utf-8")
    tree = parser.parse(source_bytes)
    lines = source_bytes.split(b"\n")

    def to_position(point: tuple[int, int]) -> Position:
        row, byte_column = point
        line = lines[row] if row < len(lines) else b""
        character = len(line[:byte_column].decode("utf-8", errors="replace"))
        return Position(line=row, character=character)

    def node_to_model(node: Node, field: str | None) -> ScriptNode:
        children: list[ScriptNode] = []
        cursor = node.walk()
        if cursor.goto_first_child():
            while True:
                child = cursor.node
                if child is not None:
                    children.append(node_to_model(child, cursor.field_name))
                if not cursor.goto_next_sibling():
                    break

        text_value = None
        if node.child_count == 0 and node.text is not None:
            text_value = node.text.decode("utf-8", errors="replace")

        return ScriptNode(
            type=node.type,
            range=SourceRange(
                start=to_position(node.start_point),
                end=to_position(node.end_point),
            ),
            named=node.is_named,
            field=field,
            text=text_value,
            children=children,
        )

    return node_to_model(tree.root_node, None)
