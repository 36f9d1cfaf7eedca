"""Template tree: the Glimmer node shapes produced by ``parse_template``.

Every node is a frozen pydantic model tagged by ``type`` and carries a
zero-based, half-open ``range``. ``child_nodes()`` yields children in document
order so the position locator can descend them.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from ember_nav.models import SourceRange


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    range: SourceRange

    def child_nodes(self) -> list[TemplateNode]:
        return []


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class PathExpression(_Node):
    type: Literal["PathExpression"] = "PathExpression"
    original: str
    this: bool = False
    data: bool = False
    parts: list[str] = Field(default_factory=list)


class StringLiteral(_Node):
    type: Literal["StringLiteral"] = "StringLiteral"
    value: str
    original: str


class NumberLiteral(_Node):
    type: Literal["NumberLiteral"] = "NumberLiteral"
    value: float
    original: str


class BooleanLiteral(_Node):
    type: Literal["BooleanLiteral"] = "BooleanLiteral"
    value: bool


class NullLiteral(_Node):
    type: Literal["NullLiteral"] = "NullLiteral"


class UndefinedLiteral(_Node):
    type: Literal["UndefinedLiteral"] = "UndefinedLiteral"


class HashPair(_Node):
    type: Literal["HashPair"] = "HashPair"
    key: str
    value: Expression

    def child_nodes(self) -> list[TemplateNode]:
        return [self.value]


class Hash(_Node):
    type: Literal["Hash"] = "Hash"
    pairs: list[HashPair] = Field(default_factory=list)

    def child_nodes(self) -> list[TemplateNode]:
        return list(self.pairs)


class _Call(_Node):
    path: Expression
    params: list[Expression] = Field(default_factory=list)
    hash: Hash

    def child_nodes(self) -> list[TemplateNode]:
        return [self.path, *self.params, self.hash]


class SubExpression(_Call):
    type: Literal["SubExpression"] = "SubExpression"


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


class TextNode(_Node):
    type: Literal["TextNode"] = "TextNode"
    chars: str


class MustacheStatement(_Call):
    type: Literal["MustacheStatement"] = "MustacheStatement"
    trusting: bool = False


class ElementModifierStatement(_Call):
    type: Literal["ElementModifierStatement"] = "ElementModifierStatement"


class MustacheCommentStatement(_Node):
    type: Literal["MustacheCommentStatement"] = "MustacheCommentStatement"
    value: str


class CommentStatement(_Node):
    type: Literal["CommentStatement"] = "CommentStatement"
    value: str


class ConcatStatement(_Node):
    type: Literal["ConcatStatement"] = "ConcatStatement"
    parts: list[TextNode | MustacheStatement] = Field(default_factory=list)

    def child_nodes(self) -> list[TemplateNode]:
        return list(self.parts)


class AttrNode(_Node):
    type: Literal["AttrNode"] = "AttrNode"
    name: str
    value: TextNode | MustacheStatement | ConcatStatement

    def child_nodes(self) -> list[TemplateNode]:
        return [self.value]


class Block(_Node):
    type: Literal["Block"] = "Block"
    body: list[Statement] = Field(default_factory=list)
    block_params: list[str] = Field(default_factory=list)

    def child_nodes(self) -> list[TemplateNode]:
        return list(self.body)


class BlockStatement(_Call):
    type: Literal["BlockStatement"] = "BlockStatement"
    program: Block
    inverse: Block | None = None

    def child_nodes(self) -> list[TemplateNode]:
        children = [*super().child_nodes(), self.program]
        if self.inverse is not None:
            children.append(self.inverse)
        return children


class ElementNode(_Node):
    type: Literal["ElementNode"] = "ElementNode"
    tag: str
    self_closing: bool = False
    attributes: list[AttrNode] = Field(default_factory=list)
    modifiers: list[ElementModifierStatement] = Field(default_factory=list)
    comments: list[MustacheCommentStatement] = Field(default_factory=list)
    children: list[Statement] = Field(default_factory=list)
    block_params: list[str] = Field(default_factory=list)

    def child_nodes(self) -> list[TemplateNode]:
        opening: list[TemplateNode] = [*self.attributes, *self.modifiers, *self.comments]
        opening.sort(key=lambda node: node.range.start.key())
        return [*opening, *self.children]


class Template(_Node):
    type: Literal["Template"] = "Template"
    body: list[Statement] = Field(default_factory=list)

    def child_nodes(self) -> list[TemplateNode]:
        return list(self.body)


Expression = Annotated[
    PathExpression
    | SubExpression
    | StringLiteral
    | NumberLiteral
    | BooleanLiteral
    | NullLiteral
    | UndefinedLiteral,
    Field(discriminator="type"),
]

Statement = Annotated[
    TextNode
    | MustacheStatement
    | BlockStatement
    | ElementNode
    | MustacheCommentStatement
    | CommentStatement,
    Field(discriminator="type"),
]

TemplateNode = (
    Template
    | Block
    | ElementNode
    | AttrNode
    | TextNode
    | MustacheStatement
    | BlockStatement
    | ElementModifierStatement
    | SubExpression
    | ConcatStatement
    | PathExpression
    | StringLiteral
    | NumberLiteral
    | BooleanLiteral
    | NullLiteral
    | UndefinedLiteral
    | Hash
    | HashPair
    | MustacheCommentStatement
    | CommentStatement
)

for _model in (
    HashPair,
    Hash,
    SubExpression,
    MustacheStatement,
    ElementModifierStatement,
    ConcatStatement,
    AttrNode,
    Block,
    BlockStatement,
    ElementNode,
    Template,
):
    _model.model_rebuild()  # necessary for recursive types
