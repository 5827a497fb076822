"""Generator resolution -- map a profile's ``generator`` value to a plugin.

:class:`GeneratorLoader` is the single place generator plugins are looked up.
It has two strategies behind :meth:`GeneratorLoader.resolve`:

* **Path** -- values starting with ``.`` (or absolute paths) name a local
  ``.py`` file or package directory, resolved against the working directory
  in :class:`~swagen.config.Settings`.
* **Named** -- short names are looked up, in order, in the loader's
  registry (which ships the built-in ``typescript`` generator), in the
  ``swagen.generators`` entry-point group, and finally as the conventional
  package ``swagen_<name>``.

Third-party packages register generators with an entry point::

    [project.entry-points."swagen.generators"]
    kotlin = "swagen_kotlin"
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.metadata
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Optional

from swagen.config import Settings
from swagen.exceptions import GeneratorResolutionError
from swagen.generators.base import Generator, ModuleGenerator

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "swagen.generators"
"""The entry-point group name used for generator discovery."""

PACKAGE_PREFIX = "swagen_"
"""Prefix of conventionally-named generator packages."""

BUILTIN_GENERATORS: dict[str, str] = {
    "typescript": "swagen.generators.typescript",
}


class GeneratorLoader:
    """Resolves generator names to :class:`~swagen.generators.base.Generator` objects.

    Resolved generators are cached by name for the lifetime of the loader,
    so profiles sharing a generator load it once per run.

    Args:
        settings: Provides the working directory for path-style names.
        registry: Extra named generators. Values may be a dotted module path,
            a module, a :class:`Generator` instance, or a ``Generator``
            subclass. Entries override the built-ins.

    Example::

        loader = GeneratorLoader(settings)
        generator = loader.resolve("petstore", "typescript")
        text = generator.generate(definition, profile)
    """

    def __init__(
        self, settings: Settings, registry: Optional[dict[str, Any]] = None
    ) -> None:
        self._settings = settings
        self._registry: dict[str, Any] = {**BUILTIN_GENERATORS, **(registry or {})}
        self._cache: dict[str, Generator] = {}

    def register(self, name: str, target: Any) -> None:
        """Add or replace a named generator."""
        self._registry[name] = target
        self._cache.pop(name, None)

    def resolve(self, key: str, name: str) -> Generator:
        """Resolve *name* for the profile *key*.

        Raises:
            GeneratorResolutionError: If the generator cannot be found or
                imported, or does not expose ``generate``.
        """
        if name in self._cache:
            return self._cache[name]

        if is_path_reference(name):
            generator = self._load_path(key, name)
        else:
            generator = self._load_named(key, name)

        self._cache[name] = generator
        logger.debug("Resolved generator '%s' to %r", name, generator)
        return generator

    # ------------------------------------------------------------------
    # Path strategy
    # ------------------------------------------------------------------

    def _load_path(self, key: str, name: str) -> Generator:
        path = self._settings.resolve(name)
        search_locations: Optional[list[str]] = None
        if path.is_dir():
            search_locations = [str(path)]
            path = path / "__init__.py"
        elif not path.exists() and not path.suffix:
            path = path.with_suffix(".py")

        if not path.is_file():
            raise GeneratorResolutionError(
                f"Cannot find generator '{name}' at {path}.", profile_key=key
            )

        digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
        module_name = f"swagen_local_generator_{digest}"
        spec = importlib.util.spec_from_file_location(
            module_name, path, submodule_search_locations=search_locations
        )
        if spec is None or spec.loader is None:
            raise GeneratorResolutionError(
                f"Cannot load generator '{name}' from {path}.", profile_key=key
            )

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(module_name, None)
            raise GeneratorResolutionError(
                f"Cannot load generator '{name}': {type(exc).__name__}: {exc}",
                profile_key=key,
            ) from exc
        return _as_generator(key, name, module)

    # ------------------------------------------------------------------
    # Named strategy
    # ------------------------------------------------------------------

    def _load_named(self, key: str, name: str) -> Generator:
        if name in self._registry:
            target = self._registry[name]
            if isinstance(target, str):
                target = self._import(key, name, target)
            return _as_generator(key, name, target)

        entry_point = _find_entry_point(name)
        if entry_point is not None:
            try:
                target = entry_point.load()
            except Exception as exc:
                raise GeneratorResolutionError(
                    f"Cannot load generator '{name}' from entry point "
                    f"'{entry_point.value}': {exc}",
                    profile_key=key,
                ) from exc
            return _as_generator(key, name, target)

        module_name = PACKAGE_PREFIX + name.replace("-", "_")
        return _as_generator(key, name, self._import(key, name, module_name))

    def _import(self, key: str, name: str, module_name: str) -> ModuleType:
        try:
            return importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            if exc.name == module_name:
                raise GeneratorResolutionError(
                    f"Cannot find generator '{name}'. Install the '{module_name}' "
                    "package or use a local path starting with '.'.",
                    profile_key=key,
                ) from exc
            raise GeneratorResolutionError(
                f"Cannot load generator '{name}': {exc}", profile_key=key
            ) from exc
        except Exception as exc:
            raise GeneratorResolutionError(
                f"Cannot load generator '{name}': {type(exc).__name__}: {exc}",
                profile_key=key,
            ) from exc


def is_path_reference(name: str) -> bool:
    """Return True when *name* is a relative (``.``-prefixed) or absolute path."""
    return name.startswith(".") or Path(name).is_absolute()


def _find_entry_point(name: str) -> Optional[importlib.metadata.EntryPoint]:
    entry_points = importlib.metadata.entry_points()
    if hasattr(entry_points, "select"):
        eps = entry_points.select(group=ENTRY_POINT_GROUP)
    else:
        eps = entry_points.get(ENTRY_POINT_GROUP, [])  # type: ignore[union-attr]
    for ep in eps:
        if ep.name == name:
            return ep
    return None


def _as_generator(key: str, name: str, target: Any) -> Generator:
    """Wrap a module, class or instance as a :class:`Generator`."""
    if isinstance(target, Generator):
        return target
    if isinstance(target, type) and issubclass(target, Generator):
        return target()
    if callable(getattr(target, "generate", None)):
        return ModuleGenerator(target, name=name)
    raise GeneratorResolutionError(
        f"Generator '{name}' does not expose a generate(definition, profile) function.",
        profile_key=key,
    )
