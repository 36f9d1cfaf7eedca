import logging
import re
from collections.abc import Iterable
from pathlib import Path

from ember_nav.models import ORIGIN_RANGE, Location, Position, SourceRange
from ember_nav.project.documents import path_to_uri

logger = logging.getLogger(__name__)

_LINES = re.compile(r".*?(?:\r\n?|\n|$)")
_ASCII_LETTER = re.compile(r"[A-Za-z]")


def split_lines(text: str) -> list[str]:
    """Split keeping line terminators; a trailing empty line is dropped."""
    lines = [match.group(0) for match in _LINES.finditer(text)]
    return [line for line in lines if line]


def first_text_position(text: str, needle: str) -> Position | None:
    """Find the first line where ``needle`` looks like a declaration.

    Only the first occurrence on each line is considered. It qualifies when
    the text before it ends in whitespace (or is blank) and the character
    after it is not an ASCII letter. This is a textual approximation and can
    match inside comments or strings.
    """
    if not needle:
        return None
    for index, line in enumerate(split_lines(text)):
        column = line.find(needle)
        if column == -1:
            continue
        before = line[:column]
        after = line[column + len(needle) :]
        if not (before[-1:].isspace() or not before.strip()):
            continue
        if _ASCII_LETTER.match(after[:1]):
            continue
        return Position(line=index, character=column)
    return None


def to_locations(paths: Iterable[Path]) -> list[Location]:
    return [Location(uri=path_to_uri(path), range=ORIGIN_RANGE) for path in paths if path.is_file()]


def to_locations_with_position(paths: Iterable[Path], needle: str) -> list[Location]:
    locations: list[Location] = []
    for path in paths:
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Dropping %s: %s", path, exc)
            continue

        start = first_text_position(text, needle)
        if start is None:
            text_range = ORIGIN_RANGE
        else:
            end = Position(line=start.line, character=start.character + len(needle))
            text_range = SourceRange(start=start, end=end)
        locations.append(Location(uri=path_to_uri(path), range=text_range))
    return locations
