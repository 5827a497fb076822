"""Profile orchestration -- run every profile's pipeline independently.

Each profile moves through::

    pending -> validating -> resolving -> parsing -> normalizing
            -> (debug dump) -> generator-resolving -> generating -> writing -> done

and drops to ``failed`` from any step. Profiles with ``skip: true`` go
straight to ``skipped`` without being validated.

:meth:`Orchestrator.run` validates every profile first, so a malformed
profile fails before any file or network access. The remaining profiles
then run as concurrent :mod:`asyncio` tasks on one event loop: file reads
and writes happen in worker threads, URL fetches share one
:class:`httpx.AsyncClient`. A profile-scoped :class:`~swagen.exceptions.SwagenError`
is logged with the profile's key and recorded in the
:class:`~swagen.models.RunSummary`; it never stops sibling profiles.

Profiles writing to the same output path race; the last writer wins, and a
warning names the profiles involved.
"""

from __future__ import annotations

import asyncio
import enum
import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
from pydantic import BaseModel

from swagen.config import Settings, atomic_write
from swagen.exceptions import ArtifactWriteError, NormalizationError, SwagenError
from swagen.generators.base import invoke_generator
from swagen.generators.loader import GeneratorLoader
from swagen.models import Definition, Profile, ProfileOutcome, ProfileStatus, RunSummary
from swagen.output import debug, error, success, warning
from swagen.parser.document import parse_document
from swagen.parser.normalizer import normalize
from swagen.sources import create_client, read_document
from swagen.validator import validate_profile

logger = logging.getLogger(__name__)

Normalizer = Callable[[dict[str, Any]], Definition]


class ProfileState(str, enum.Enum):
    """Pipeline steps a profile passes through."""

    PENDING = "pending"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    PARSING = "parsing"
    NORMALIZING = "normalizing"
    DEBUG_DUMP = "debug-dump"
    GENERATOR_RESOLVING = "generator-resolving"
    GENERATING = "generating"
    WRITING = "writing"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


class Orchestrator:
    """Drives the document-to-artifact pipeline for a whole configuration.

    Args:
        settings: Working directory and transport settings.
        normalizer: Turns a parsed document into a definition. Defaults to
            :func:`~swagen.parser.normalizer.normalize`.
        loader: Generator loader; one is created from *settings* if omitted.
        client: HTTP client for URL documents. When omitted, a client is
            created for the run and closed afterwards.

    Example::

        summary = asyncio.run(Orchestrator(settings).run(config))
        for outcome in summary.failed:
            print(outcome.key, outcome.error)
    """

    def __init__(
        self,
        settings: Settings,
        normalizer: Normalizer = normalize,
        loader: Optional[GeneratorLoader] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings
        self.loader = loader or GeneratorLoader(settings)
        self._normalizer = normalizer
        self._client = client

    async def run(self, config: dict[str, Any]) -> RunSummary:
        """Process every profile in *config* and return the per-profile outcomes.

        Outcomes are listed in configuration order regardless of which
        profile finished first.
        """
        outcomes: dict[str, ProfileOutcome] = {}
        ready: list[tuple[str, Profile]] = []

        for key, data in config.items():
            if isinstance(data, dict) and data.get("skip"):
                _enter(key, ProfileState.SKIPPED)
                outcomes[key] = ProfileOutcome(key=key, status=ProfileStatus.SKIPPED)
                continue
            _enter(key, ProfileState.VALIDATING)
            try:
                ready.append((key, validate_profile(key, data)))
            except SwagenError as exc:
                outcomes[key] = _failed(key, exc)

        self._warn_shared_outputs(ready)

        if ready:
            client = self._client or create_client(self.settings)
            try:
                results = await asyncio.gather(
                    *(self._run_profile(key, profile, client) for key, profile in ready)
                )
            finally:
                if self._client is None:
                    await client.aclose()
            for outcome in results:
                outcomes[outcome.key] = outcome

        return RunSummary(outcomes=[outcomes[key] for key in config if key in outcomes])

    async def _run_profile(
        self, key: str, profile: Profile, client: httpx.AsyncClient
    ) -> ProfileOutcome:
        try:
            output_path = await self._process(key, profile, client)
        except SwagenError as exc:
            return _failed(key, exc)
        except Exception as exc:
            logger.exception("Unexpected error while processing profile '%s'", key)
            error(f"[{key}] Unexpected error: {type(exc).__name__}: {exc}")
            _enter(key, ProfileState.FAILED)
            return ProfileOutcome(
                key=key, status=ProfileStatus.FAILED, error_kind="internal", error=str(exc)
            )
        _enter(key, ProfileState.DONE)
        return ProfileOutcome(key=key, status=ProfileStatus.DONE, output_path=str(output_path))

    async def _process(self, key: str, profile: Profile, client: httpx.AsyncClient) -> Path:
        _enter(key, ProfileState.RESOLVING)
        raw = await read_document(key, profile, self.settings, client)

        _enter(key, ProfileState.PARSING)
        document = parse_document(raw.text, key, hint=raw.hint)

        _enter(key, ProfileState.NORMALIZING)
        definition = self._normalize(key, document)

        if profile.debug.definition:
            _enter(key, ProfileState.DEBUG_DUMP)
            debug_path = self.settings.resolve(profile.debug.definition)
            await self._write(key, debug_path, _dump_definition(definition))
            debug(f"[{key}] Definition file written to '{profile.debug.definition}'.")

        _enter(key, ProfileState.GENERATOR_RESOLVING)
        generator = self.loader.resolve(key, profile.generator)

        _enter(key, ProfileState.GENERATING)
        output = invoke_generator(key, generator, definition, profile)

        _enter(key, ProfileState.WRITING)
        output_path = self.settings.resolve(profile.output)
        await self._write(key, output_path, output)
        success(f"[{key}] Code generated at '{output_path}'.")
        return output_path

    def _normalize(self, key: str, document: dict[str, Any]) -> Definition:
        try:
            return self._normalizer(document)
        except SwagenError as exc:
            if exc.profile_key is None:
                exc.profile_key = key
            raise
        except Exception as exc:
            raise NormalizationError(
                f"Cannot normalize document: {type(exc).__name__}: {exc}", profile_key=key
            ) from exc

    def _warn_shared_outputs(self, ready: list[tuple[str, Profile]]) -> None:
        owners: dict[Path, str] = {}
        for key, profile in ready:
            path = self.settings.resolve(profile.output)
            if path in owners:
                warning(
                    f"Profiles '{owners[path]}' and '{key}' both write to '{path}'; "
                    "the last one to finish wins."
                )
            else:
                owners[path] = key

    async def _write(self, key: str, path: Path, text: str) -> None:
        try:
            await asyncio.to_thread(atomic_write, path, text)
        except OSError as exc:
            raise ArtifactWriteError(f"Cannot write '{path}': {exc}", profile_key=key) from exc


def run_profiles(
    settings: Settings,
    config: dict[str, Any],
    normalizer: Normalizer = normalize,
    loader: Optional[GeneratorLoader] = None,
) -> RunSummary:
    """Synchronous wrapper around :meth:`Orchestrator.run`."""
    orchestrator = Orchestrator(settings, normalizer=normalizer, loader=loader)
    return asyncio.run(orchestrator.run(config))


def _enter(key: str, state: ProfileState) -> None:
    debug(f"[{key}] {state.value}")


def _failed(key: str, exc: SwagenError) -> ProfileOutcome:
    if exc.profile_key is None:
        exc.profile_key = key
    error(str(exc))
    _enter(key, ProfileState.FAILED)
    return ProfileOutcome(
        key=key,
        status=ProfileStatus.FAILED,
        error_kind=exc.kind.value,
        error=exc.message,
    )


def _dump_definition(definition: Any) -> str:
    if isinstance(definition, BaseModel):
        return definition.model_dump_json(indent=4)
    return json.dumps(definition, indent=4, default=str)
