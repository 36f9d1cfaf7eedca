from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(ge=0)

    def key(self) -> tuple[int, int]:
        return (self.line, self.character)


class SourceRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    def contains(self, position: Position) -> bool:
        """Half-open containment: ``start <= position < end``."""
        return self.start.key() <= position.key() < self.end.key()


ORIGIN = Position(line=0, character=0)
ORIGIN_RANGE = SourceRange(start=ORIGIN, end=ORIGIN)


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    uri: str
    range: SourceRange


# ---------------------------------------------------------------------------
# Semantic references
# ---------------------------------------------------------------------------


class AngleComponent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["angle-component"] = "angle-component"
    name: str


class BlockComponent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["block-component"] = "block-component"
    name: str


class MustacheOrHelper(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["mustache-or-helper"] = "mustache-or-helper"
    name: str


class ActionName(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["action-name"] = "action-name"
    name: str


class LocalProperty(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["local-property"] = "local-property"
    name: str


class AttributeArgument(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["attribute-argument"] = "attribute-argument"
    name: str
    owner_tag: str


class HashPairUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["hash-pair-usage"] = "hash-pair-usage"
    key: str
    owner_component_name: str


class ModelFieldType(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["model-field-type"] = "model-field-type"
    name: str


class TransformFieldType(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["transform-field-type"] = "transform-field-type"
    name: str


SemanticReference = Annotated[
    AngleComponent
    | BlockComponent
    | MustacheOrHelper
    | ActionName
    | LocalProperty
    | AttributeArgument
    | HashPairUsage
    | ModelFieldType
    | TransformFieldType,
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Layout conventions and projects
# ---------------------------------------------------------------------------


class Classic(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["classic"] = "classic"

    @property
    def base(self) -> str:
        return "app"


class Pod(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pod"] = "pod"
    prefix: str

    @property
    def base(self) -> str:
        return f"app/{self.prefix}"


class ModuleUnification(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["module-unification"] = "module-unification"

    @property
    def base(self) -> str:
        return "src/ui"


LayoutConvention = Annotated[Classic | Pod | ModuleUnification, Field(discriminator="kind")]


class Project(BaseModel):
    model_config = ConfigDict(frozen=True)

    root: Path
    module_unification: bool = False
    pod_prefix: str | None = None

    def conventions(self) -> list[LayoutConvention]:
        """Applicable layouts, ordered module-unification, pod, classic."""
        conventions: list[LayoutConvention] = []
        if self.module_unification:
            conventions.append(ModuleUnification())
        if self.pod_prefix:
            conventions.append(Pod(prefix=self.pod_prefix))
        if not self.module_unification:
            conventions.append(Classic())
        return conventions
