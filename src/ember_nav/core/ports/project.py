from pathlib import Path
from typing import Protocol

from ember_nav.models import Project


class ProjectLocator(Protocol):
    def project_for_path(self, path: Path) -> Project | None: ...

    def addon_roots(self, root: Path) -> list[Path]: ...
