import logging
import threading
from pathlib import Path
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)


def uri_to_path(uri: str) -> Path | None:
    """``file://`` URIs and plain paths map to a path; other schemes to ``None``."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if parsed.scheme == "" or len(parsed.scheme) == 1:
        # A bare path, or a Windows drive letter read as a scheme.
        return Path(uri)
    return None


def path_to_uri(path: Path) -> str:
    return path.absolute().as_uri()


class DocumentCache:
    """Text of open documents keyed by URI, falling back to the file on disk."""

    def __init__(self) -> None:
        self._documents: dict[str, str] = {}
        self._lock = threading.Lock()

    def open(self, uri: str, text: str) -> None:
        with self._lock:
            self._documents[uri] = text

    def close(self, uri: str) -> None:
        with self._lock:
            self._documents.pop(uri, None)

    def get_text(self, uri: str) -> str | None:
        with self._lock:
            text = self._documents.get(uri)
        if text is not None:
            return text

        path = uri_to_path(uri)
        if path is None:
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            return None
