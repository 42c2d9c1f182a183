"""
Migration loader utilities for loading migration files into the process.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from .exceptions import MigrationLoadError

LOGGER = logging.getLogger(__name__)

# Modules loaded by any ModuleLoader, keyed by canonical file path
_LOADED_MODULES: dict[Path, ModuleType] = {}


@dataclass(frozen=True)
class MigrationUnit:
    """A class introduced by a loaded migration file."""

    migration_class: type
    file: Path

    @property
    def name(self) -> str:
        """Fully-qualified name: ``<module>.<qualname>``."""
        return f"{self.migration_class.__module__}.{self.migration_class.__qualname__}"

    @property
    def short_name(self) -> str:
        """Class name without its module."""
        return self.migration_class.__name__


def module_name_for(path: Path) -> str:
    """
    Derive the module name a file is loaded under.

    Files inside a package (parent directories holding ``__init__.py``) get
    their dotted package path as prefix. Other files get a ``migration_``
    prefix carrying a digest of their directory, so same-named files in
    different directories never share a module name.
    """
    parent = path.parent
    if not (parent / "__init__.py").is_file():
        digest = hashlib.sha256(str(parent).encode("utf-8")).hexdigest()[:10]
        return f"migration_{digest}_{path.stem}"

    parts = [path.stem]
    while (parent / "__init__.py").is_file():
        parts.append(parent.name)
        if parent.parent == parent:
            break
        parent = parent.parent
    return ".".join(reversed(parts))


class ModuleLoader:
    """
    Loads migration files once and reports the classes each one introduced.

    Loaded modules are registered in ``sys.modules`` so the classes stay
    addressable by their fully-qualified name for the process lifetime.
    """

    def __init__(self):
        self._modules: dict[Path, ModuleType] = {}

    @property
    def loaded_files(self) -> list[Path]:
        return list(self._modules)

    def require_once(self, path: str | Path) -> ModuleType:
        """
        Load a migration file unless it has already been loaded.

        Args:
            path: Path to the migration Python file

        Returns:
            The loaded module

        Raises:
            MigrationLoadError: If the file cannot be loaded
        """
        try:
            real_path = Path(path).resolve(strict=True)
        except OSError as e:
            raise MigrationLoadError(path, str(e)) from e

        module = self._modules.get(real_path) or _LOADED_MODULES.get(real_path)
        if module is None:
            name = module_name_for(real_path)
            module = self._registered_module(name, real_path) or self._exec_file(name, real_path)
            _LOADED_MODULES[real_path] = module

        self._modules[real_path] = module
        return module

    def load_all(self, files: Iterable[str | Path]) -> list[Path]:
        """
        Load every file and return their canonical paths, in input order.

        Raises:
            MigrationLoadError: On the first file that cannot be loaded
        """
        loaded = []
        for file in files:
            module = self.require_once(file)
            loaded.append(Path(module.__file__).resolve())
        LOGGER.debug("Loaded %d migration files", len(loaded))
        return loaded

    def units_for(self, files: Iterable[Path]) -> list[MigrationUnit]:
        """
        Get the classes introduced by the given loaded files.

        Classes are returned in load order, then in definition order within
        each file. Classes a file merely imports are not included.
        """
        units = []
        for file in files:
            module = self._modules.get(file)
            if module is None:
                continue
            seen: set[type] = set()
            for attr in vars(module).values():
                if not isinstance(attr, type) or attr.__module__ != module.__name__:
                    continue
                # Aliases keep the position of the original definition
                if attr not in seen:
                    seen.add(attr)
                    units.append(MigrationUnit(attr, file))
        return units

    @staticmethod
    def _registered_module(name: str, real_path: Path) -> ModuleType | None:
        module = sys.modules.get(name)
        module_file = getattr(module, "__file__", None)
        if module_file and Path(module_file).resolve() == real_path:
            LOGGER.debug("Migration module %s already loaded", name)
            return module
        return None

    @staticmethod
    def _exec_file(name: str, real_path: Path) -> ModuleType:
        spec = importlib.util.spec_from_file_location(name, real_path)
        if spec is None or spec.loader is None:
            raise MigrationLoadError(real_path, "not a loadable Python file")

        module = importlib.util.module_from_spec(spec)
        previous = sys.modules.get(name)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            if previous is None:
                del sys.modules[name]
            else:
                sys.modules[name] = previous
            raise MigrationLoadError(real_path, f"{type(e).__name__}: {e}") from e

        LOGGER.debug("Loaded migration module %s from %s", name, real_path)
        return module
