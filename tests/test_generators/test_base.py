"""Tests for swagen.generators.base."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from swagen.exceptions import ErrorKind, GenerationError, GeneratorValidationError
from swagen.generators.base import Generator, ModuleGenerator, invoke_generator
from swagen.models import Definition, Profile


@pytest.fixture
def definition() -> Definition:
    return Definition(spec_version="2.0")


@pytest.fixture
def profile() -> Profile:
    return Profile(file="petstore.json", output="out.txt", generator="./gen.py")


class _Recorder(Generator):
    name = "recorder"

    def __init__(self, reject: bool = False) -> None:
        self.calls: list[str] = []
        self.reject = reject

    def validate_profile(self, profile: Profile) -> None:
        self.calls.append("validate")
        if self.reject:
            raise ValueError("options.namespace is required")

    def generate(self, definition: Definition, profile: Profile) -> str:
        self.calls.append("generate")
        return "output"


class TestInvokeGenerator:
    def test_validates_before_generating(self, definition, profile) -> None:
        generator = _Recorder()
        assert invoke_generator("api", generator, definition, profile) == "output"
        assert generator.calls == ["validate", "generate"]

    def test_rejection_skips_generate(self, definition, profile) -> None:
        generator = _Recorder(reject=True)
        with pytest.raises(GeneratorValidationError) as exc_info:
            invoke_generator("api", generator, definition, profile)
        assert generator.calls == ["validate"]
        err = exc_info.value
        assert err.kind is ErrorKind.GENERATOR_VALIDATION
        assert err.profile_key == "api"
        assert "options.namespace is required" in str(err)
        assert isinstance(err.__cause__, ValueError)

    def test_generate_exception_is_wrapped(self, definition, profile) -> None:
        def _generate(definition, profile):
            raise KeyError("services")

        generator = ModuleGenerator(SimpleNamespace(generate=_generate), name="broken")
        with pytest.raises(GenerationError, match="broken.*KeyError") as exc_info:
            invoke_generator("api", generator, definition, profile)
        assert exc_info.value.profile_key == "api"

    def test_non_text_result(self, definition, profile) -> None:
        generator = ModuleGenerator(SimpleNamespace(generate=lambda d, p: None), name="null")
        with pytest.raises(GenerationError, match="returned NoneType"):
            invoke_generator("api", generator, definition, profile)


class TestModuleGenerator:
    def test_validate_hook_is_optional(self, definition, profile) -> None:
        generator = ModuleGenerator(SimpleNamespace(generate=lambda d, p: "x"), name="plain")
        generator.validate_profile(profile)
        assert generator.generate(definition, profile) == "x"

    def test_validate_hook_is_called(self, profile) -> None:
        seen: list[Profile] = []
        module = SimpleNamespace(generate=lambda d, p: "", validate_profile=seen.append)
        ModuleGenerator(module).validate_profile(profile)
        assert seen == [profile]

    def test_name_defaults_to_module_name(self) -> None:
        import swagen.generators.typescript as typescript

        assert ModuleGenerator(typescript).name == "swagen.generators.typescript"

    def test_camel_case_validate_hook_is_called(self, definition, profile) -> None:
        def _reject(profile: Profile) -> None:
            raise ValueError("options.namespace is required")

        module = SimpleNamespace(generate=lambda d, p: "x", validateProfile=_reject)
        with pytest.raises(GeneratorValidationError, match="options.namespace"):
            invoke_generator("api", ModuleGenerator(module, name="camel"), definition, profile)
