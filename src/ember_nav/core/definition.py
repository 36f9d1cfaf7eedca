"""Go-to-definition for templates and scripts.

A request runs: project lookup, parse, locate the focused path, classify it,
enumerate candidate files (project layouts first, addons on a miss) and turn
the surviving files into locations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ember_nav.core.classify import classify_script_path, classify_template_path
from ember_nav.core.languages import UnsupportedDocumentError, document_kind, script_dialect
from ember_nav.core.ports.documents import DocumentStore
from ember_nav.core.ports.project import ProjectLocator
from ember_nav.core.position import ASTPath, locate
from ember_nav.core.script_ast import parse_script
from ember_nav.core.template_parser import TemplateSyntaxError, parse_template
from ember_nav.models import (
    ActionName,
    AngleComponent,
    AttributeArgument,
    BlockComponent,
    HashPairUsage,
    LocalProperty,
    Location,
    ModelFieldType,
    MustacheOrHelper,
    Position,
    Project,
    SemanticReference,
    TransformFieldType,
)
from ember_nav.project.documents import uri_to_path
from ember_nav.resolution import (
    AddonResolver,
    AddonRootsCache,
    component_name_from_path,
    helper_paths,
    is_template_path,
    kebab_case,
    model_paths,
    paths_for_component_scripts,
    paths_for_component_templates,
    to_locations,
    to_locations_with_position,
    transform_paths,
)

logger = logging.getLogger(__name__)

_YIELD = "{{yield"


@dataclass(frozen=True)
class FocusedReference:
    project: Project
    file_path: Path
    reference: SemanticReference


def _existing(paths: Iterable[Path]) -> list[Path]:
    return [path for path in paths if path.is_file()]


def prefer_templates(paths: list[Path]) -> list[Path]:
    """With several candidates, templates win; a lone candidate is kept as is."""
    if len(paths) <= 1:
        return paths
    templates = [path for path in paths if is_template_path(path)]
    return templates or paths


def component_name(name: str) -> str:
    """Angle-bracket names are PascalCase; mustache names are already dashed."""
    if name[:1].isupper() or "::" in name:
        return kebab_case(name)
    return name


class DefinitionProvider:
    def __init__(
        self,
        projects: ProjectLocator,
        documents: DocumentStore,
        addon_resolver: AddonResolver | None = None,
    ) -> None:
        self.projects = projects
        self.documents = documents
        self.addons = addon_resolver or AddonResolver(AddonRootsCache(projects.addon_roots))

    # -- entry points -------------------------------------------------------

    def resolve_definition(self, uri: str, position: Position) -> list[Location] | None:
        focused = self.reference_at(uri, position)
        if focused is None:
            return None
        locations = self.resolve_reference(focused)
        logger.debug("%s resolved to %d location(s)", focused.reference.kind, len(locations))
        return locations

    def reference_at(self, uri: str, position: Position) -> FocusedReference | None:
        file_path = uri_to_path(uri)
        if file_path is None:
            return None
        project = self.projects.project_for_path(file_path)
        if project is None:
            return None
        try:
            kind = document_kind(file_path)
        except UnsupportedDocumentError:
            logger.debug("No definitions for %s", file_path)
            return None
        text = self.documents.get_text(uri)
        if text is None:
            return None

        if kind == "template":
            try:
                tree = parse_template(text)
            except TemplateSyntaxError as exc:
                logger.debug("Cannot parse %s: %s", file_path, exc)
                return None
            path = locate(tree, position)
            reference = classify_template_path(path) if path is not None else None
        else:
            script_tree = parse_script(text, script_dialect(file_path))
            script_path: ASTPath | None = locate(script_tree, position)
            reference = classify_script_path(script_path) if script_path is not None else None

        if reference is None:
            logger.debug("No reference at %s:%d:%d", file_path, position.line, position.character)
            return None
        logger.debug("Classified %r at %s", reference, file_path)
        return FocusedReference(project=project, file_path=file_path, reference=reference)

    # -- resolution ---------------------------------------------------------

    def resolve_reference(self, focused: FocusedReference) -> list[Location]:
        project, reference = focused.project, focused.reference

        if isinstance(reference, AngleComponent):
            paths = self._component_files(project, component_name(reference.name))
            return to_locations(prefer_templates(paths))

        if isinstance(reference, BlockComponent):
            return self._block_component_definition(project, reference.name)

        if isinstance(reference, (ActionName, LocalProperty)):
            return self._property_definition(project, focused.file_path, reference.name)

        if isinstance(reference, MustacheOrHelper):
            name = component_name(reference.name)
            paths = self._component_files(project, name, helper_paths(project.root, "app", name))
            return to_locations(prefer_templates(paths))

        if isinstance(reference, AttributeArgument):
            paths = self._component_files(project, component_name(reference.owner_tag))
            return to_locations_with_position(prefer_templates(paths), reference.name)

        if isinstance(reference, HashPairUsage):
            paths = self._component_files(project, reference.owner_component_name)
            return to_locations_with_position(prefer_templates(paths), "@" + reference.key)

        if isinstance(reference, ModelFieldType):
            paths = _existing(model_paths(project.root, reference.name))
            if not paths:
                paths = self.addons.addon_candidates_for_type(project.root, "models", reference.name)
            return to_locations(paths)

        if isinstance(reference, TransformFieldType):
            paths = _existing(transform_paths(project.root, reference.name))
            if not paths:
                paths = self.addons.addon_candidates_for_type(project.root, "transforms", reference.name)
            return to_locations(paths)

        return []

    def _component_files(self, project: Project, name: str, extra: Iterable[Path] = ()) -> list[Path]:
        paths = _existing(
            [
                *paths_for_component_scripts(project, name),
                *paths_for_component_templates(project, name),
                *extra,
            ]
        )
        if not paths:
            paths = self.addons.addon_candidates_for_component(project.root, name)
        return paths

    def _block_component_definition(self, project: Project, name: str) -> list[Location]:
        paths = _existing(paths_for_component_templates(project, name))
        if not paths:
            paths = [
                path for path in self.addons.addon_candidates_for_component(project.root, name) if is_template_path(path)
            ]
        return to_locations_with_position(paths, _YIELD)

    def _property_definition(self, project: Project, file_path: Path, name: str) -> list[Location]:
        owner = component_name_from_path(project.root, file_path)
        if owner is None:
            return []
        paths = _existing(paths_for_component_scripts(project, owner))
        if not paths:
            paths = [
                path
                for path in self.addons.addon_candidates_for_component(project.root, owner)
                if not is_template_path(path)
            ]
        needle = name.removeprefix("this.").split(".")[0]
        return to_locations_with_position(paths, needle)
