"""
Stock finders deciding which files in a directory hold migrations.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from .finder import Finder
from .loader import ModuleLoader

DEFAULT_PATTERN = r"^.+[/\\]Version[^/\\]{1,255}\.py$"


class GlobFinder(Finder):
    """Finds ``Version*.py`` files directly inside the migrations directory."""

    def find_migrations(
        self, directory: str | os.PathLike[str], namespace: str | None = None
    ) -> dict[str, str]:
        return self.find(directory, self._glob_files, namespace)

    @staticmethod
    def _glob_files(directory: Path) -> list[Path]:
        return sorted(path for path in directory.glob("Version*.py") if path.is_file())


class RecursiveRegexFinder(Finder):
    """
    Walks the migrations directory recursively and keeps files whose full
    path matches a regular expression.
    """

    def __init__(self, pattern: str | None = None, loader: ModuleLoader | None = None):
        super().__init__(loader)
        self.pattern = re.compile(pattern or DEFAULT_PATTERN, re.IGNORECASE)

    def find_migrations(
        self, directory: str | os.PathLike[str], namespace: str | None = None
    ) -> dict[str, str]:
        return self.find(directory, self._matching_files, namespace)

    def _matching_files(self, directory: Path) -> list[Path]:
        files = []
        for root, dirnames, filenames in os.walk(directory):
            dirnames[:] = [d for d in dirnames if d != "__pycache__"]
            for filename in filenames:
                path = Path(root) / filename
                if self.pattern.match(str(path)):
                    files.append(path)
        return sorted(files)
