from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from pathlib import Path

from cachetools import TTLCache

from ember_nav.config import get_addon_roots_ttl
from ember_nav.resolution.layout import (
    collection_paths,
    component_script_paths_for_prefix,
    component_template_paths_for_prefix,
    helper_paths,
)

logger = logging.getLogger(__name__)

AddonRootsLoader = Callable[[Path], list[Path]]

_ADDON_FOLDER = "addon"


class AddonRootsCache:
    """Project root -> ordered addon roots, recomputed on miss or expiry.

    The loader runs outside the lock, so two threads missing at once may both
    compute; the last write wins and both results are valid.
    """

    def __init__(
        self,
        loader: AddonRootsLoader,
        ttl: float | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self.ttl = get_addon_roots_ttl() if ttl is None else ttl
        self._cache: TTLCache[str, tuple[Path, ...]] = TTLCache(maxsize=math.inf, ttl=self.ttl, timer=timer)
        self._lock = threading.Lock()

    def get_or_compute(self, root: Path) -> list[Path]:
        key = str(root)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return list(cached)

        roots = tuple(self._loader(root))
        logger.debug("Discovered %d addon root(s) for %s", len(roots), root)
        with self._lock:
            self._cache[key] = roots
        return list(roots)


def _component_candidates(addon_root: Path, name: str) -> list[Path]:
    return [
        *component_script_paths_for_prefix(addon_root, "addon", name),
        *component_script_paths_for_prefix(addon_root, "app", name),
        *component_template_paths_for_prefix(addon_root, "app", name),
        *component_template_paths_for_prefix(addon_root, "addon", name),
        *helper_paths(addon_root, "app", name),
        *helper_paths(addon_root, "addon", name),
    ]


def _type_candidates(addon_root: Path, collection: str, name: str) -> list[Path]:
    return [
        *collection_paths(addon_root, "app", collection, name),
        *collection_paths(addon_root, "addon", collection, name),
    ]


def has_addon_folder(addon_root: Path, path: Path) -> bool:
    try:
        parts = path.relative_to(addon_root).parts
    except ValueError:
        return False
    return bool(parts) and parts[0] == _ADDON_FOLDER


class AddonResolver:
    """Search addon roots in order; the first root with any hit wins.

    Within the winning root, files under the ``addon/`` folder shadow the
    ``app/`` re-exports.
    """

    def __init__(self, cache: AddonRootsCache) -> None:
        self.cache = cache

    def addon_candidates_for_component(self, root: Path, name: str) -> list[Path]:
        return self._search(root, lambda addon_root: _component_candidates(addon_root, name))

    def addon_candidates_for_type(self, root: Path, collection: str, name: str) -> list[Path]:
        return self._search(root, lambda addon_root: _type_candidates(addon_root, collection, name))

    def _search(self, root: Path, candidates: Callable[[Path], list[Path]]) -> list[Path]:
        for addon_root in self.cache.get_or_compute(root):
            existing = [path for path in candidates(addon_root) if path.is_file()]
            if not existing:
                continue
            logger.debug("Addon %s provides %d candidate(s)", addon_root, len(existing))
            preferred = [path for path in existing if has_addon_folder(addon_root, path)]
            return preferred or existing
        return []
