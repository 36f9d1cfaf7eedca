"""FastMCP server exposing ember-nav tools."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from ember_nav.core.definition import DefinitionProvider
from ember_nav.models import Position
from ember_nav.project.documents import DocumentCache, path_to_uri

logger = logging.getLogger(__name__)


def _cursor(path: str, line: int, character: int) -> tuple[str, Position]:
    if line < 0 or character < 0:
        raise ValueError("line and character must be zero-based, non-negative integers")
    return path_to_uri(Path(path)), Position(line=line, character=character)


def definition_payload(provider: DefinitionProvider, path: str, line: int, character: int) -> list[dict[str, Any]]:
    uri, position = _cursor(path, line, character)
    locations = provider.resolve_definition(uri, position) or []
    logger.info("go_to_definition %s:%d:%d -> %d location(s)", path, line, character, len(locations))
    return [location.model_dump(mode="json") for location in locations]


def classification_payload(provider: DefinitionProvider, path: str, line: int, character: int) -> dict[str, Any] | None:
    uri, position = _cursor(path, line, character)
    focused = provider.reference_at(uri, position)
    if focused is None:
        return None
    return focused.reference.model_dump(mode="json")


def create_mcp_server(provider: DefinitionProvider, documents: DocumentCache) -> FastMCP:
    """Create a FastMCP server wired to the given definition provider.

    ``documents`` must be the store the provider reads from, so that text sent
    through ``open_document`` is what later lookups see.
    """

    mcp = FastMCP("ember-nav", instructions="Go to definition in Ember templates, components, models and addons.")

    @mcp.tool()
    async def go_to_definition(path: str, line: int, character: int) -> list[dict[str, Any]]:
        """Resolve the definition of the reference at a zero-based line/character in a file."""
        return await asyncio.to_thread(definition_payload, provider, path, line, character)

    @mcp.tool()
    async def classify_reference(path: str, line: int, character: int) -> dict[str, Any] | None:
        """Classify the reference at a zero-based line/character in a file."""
        return await asyncio.to_thread(classification_payload, provider, path, line, character)

    @mcp.tool()
    async def open_document(path: str, text: str) -> str:
        """Use unsaved editor text for a file until it is closed."""
        documents.open(path_to_uri(Path(path)), text)
        return "ok"

    @mcp.tool()
    async def close_document(path: str) -> str:
        """Drop unsaved text for a file; lookups read it from disk again."""
        documents.close(path_to_uri(Path(path)))
        return "ok"

    return mcp
