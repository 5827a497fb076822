"""Tests for swagen.generators.loader."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Callable
from unittest.mock import patch

import pytest

from swagen.config import Settings
from swagen.exceptions import ErrorKind, GeneratorResolutionError
from swagen.generators.base import Generator, ModuleGenerator
from swagen.generators.loader import GeneratorLoader, is_path_reference
from swagen.models import Definition, Profile


_GENERATOR_MODULE = """\
def generate(definition, profile):
    return "hello " + definition.info.title
"""


def _render(generator: Generator) -> str:
    definition = Definition(spec_version="2.0")
    profile = Profile(file="a.json", output="a.txt", generator="x")
    return generator.generate(definition, profile)


class TestPathStrategy:
    def test_loads_relative_file(
        self, settings: Settings, write_generator: Callable[[str, str], object]
    ) -> None:
        write_generator("gens/hello.py", _GENERATOR_MODULE)
        generator = GeneratorLoader(settings).resolve("api", "./gens/hello.py")
        assert isinstance(generator, ModuleGenerator)
        assert _render(generator) == "hello API"

    def test_py_suffix_is_optional(
        self, settings: Settings, write_generator: Callable[[str, str], object]
    ) -> None:
        write_generator("hello.py", _GENERATOR_MODULE)
        assert _render(GeneratorLoader(settings).resolve("api", "./hello")) == "hello API"

    def test_package_directory(
        self, settings: Settings, write_generator: Callable[[str, str], object]
    ) -> None:
        write_generator("mygen/__init__.py", "from .impl import generate\n")
        write_generator("mygen/impl.py", _GENERATOR_MODULE)
        assert _render(GeneratorLoader(settings).resolve("api", "./mygen")) == "hello API"

    def test_absolute_path(
        self, settings: Settings, write_generator: Callable[[str, str], object]
    ) -> None:
        path = write_generator("abs.py", _GENERATOR_MODULE)
        assert _render(GeneratorLoader(settings).resolve("api", str(path))) == "hello API"

    def test_missing_file(self, settings: Settings) -> None:
        with pytest.raises(GeneratorResolutionError, match="Cannot find generator") as exc_info:
            GeneratorLoader(settings).resolve("api", "./missing.py")
        assert exc_info.value.kind is ErrorKind.GENERATOR_RESOLUTION
        assert exc_info.value.profile_key == "api"

    def test_import_error_in_module(
        self, settings: Settings, write_generator: Callable[[str, str], object]
    ) -> None:
        write_generator("broken.py", "raise RuntimeError('boom')\n")
        with pytest.raises(GeneratorResolutionError, match="RuntimeError: boom"):
            GeneratorLoader(settings).resolve("api", "./broken.py")

    def test_module_without_generate(
        self, settings: Settings, write_generator: Callable[[str, str], object]
    ) -> None:
        write_generator("empty.py", "VALUE = 1\n")
        with pytest.raises(GeneratorResolutionError, match="does not expose a generate"):
            GeneratorLoader(settings).resolve("api", "./empty.py")

    def test_results_are_cached(
        self, settings: Settings, write_generator: Callable[[str, str], object]
    ) -> None:
        write_generator("hello.py", _GENERATOR_MODULE)
        loader = GeneratorLoader(settings)
        assert loader.resolve("a", "./hello.py") is loader.resolve("b", "./hello.py")


class TestNamedStrategy:
    def test_builtin_typescript(self, settings: Settings) -> None:
        generator = GeneratorLoader(settings).resolve("api", "typescript")
        assert isinstance(generator, ModuleGenerator)
        assert generator.module.__name__ == "swagen.generators.typescript"

    def test_registry_accepts_instances_and_classes(self, settings: Settings) -> None:
        class Upper(Generator):
            def generate(self, definition, profile):
                return definition.info.title.upper()

        instance = Upper()
        loader = GeneratorLoader(settings, registry={"upper": Upper, "same": instance})
        assert _render(loader.resolve("api", "upper")) == "API"
        assert loader.resolve("api", "same") is instance

    def test_register_replaces_cached_entry(self, settings: Settings) -> None:
        loader = GeneratorLoader(settings)
        loader.register("x", SimpleNamespace(generate=lambda d, p: "one"))
        assert _render(loader.resolve("api", "x")) == "one"
        loader.register("x", SimpleNamespace(generate=lambda d, p: "two"))
        assert _render(loader.resolve("api", "x")) == "two"

    def test_entry_point(self, settings: Settings) -> None:
        entry_point = SimpleNamespace(
            name="fancy",
            value="fancy_pkg",
            load=lambda: SimpleNamespace(generate=lambda d, p: "fancy"),
        )
        with patch("swagen.generators.loader._find_entry_point", return_value=entry_point):
            assert _render(GeneratorLoader(settings).resolve("api", "fancy")) == "fancy"

    def test_conventional_package_name(self, settings: Settings) -> None:
        module = SimpleNamespace(generate=lambda d, p: "kotlin")
        with patch("swagen.generators.loader._find_entry_point", return_value=None), patch(
            "importlib.import_module", return_value=module
        ) as import_module:
            generator = GeneratorLoader(settings).resolve("api", "kotlin-client")
        import_module.assert_called_once_with("swagen_kotlin_client")
        assert _render(generator) == "kotlin"

    def test_unknown_name(self, settings: Settings) -> None:
        with pytest.raises(GeneratorResolutionError, match="swagen_does_not_exist"):
            GeneratorLoader(settings).resolve("api", "does-not-exist")


@pytest.mark.parametrize(
    "name, expected",
    [("./gen.py", True), ("../gen", True), ("/opt/gen.py", True), ("typescript", False)],
)
def test_is_path_reference(name: str, expected: bool) -> None:
    assert is_path_reference(name) is expected
