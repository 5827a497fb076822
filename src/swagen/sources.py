"""Resolve a profile's input document from a local file or a URL.

Both variants return a :class:`RawDocument` and report failures as
:class:`~swagen.exceptions.SourceError`, whose ``reason`` tells a missing
document apart from a read or network failure. Nothing here retries.

The functions are coroutines so the orchestrator can resolve every
profile's document concurrently: file reads run in a worker thread and URL
fetches go through a shared :class:`httpx.AsyncClient`. Redirect, timeout
and TLS behaviour belong to that client (see :func:`create_client`).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import httpx

from swagen.config import Settings
from swagen.exceptions import SourceError, SourceFailure
from swagen.models import Profile
from swagen.output import info

_MISSING_STATUSES = frozenset({404, 410})


@dataclass(frozen=True)
class RawDocument:
    """Unparsed document text plus where it came from.

    ``hint`` is ``"json"``, ``"yaml"`` or ``""`` and is derived from the
    file suffix or the response ``Content-Type``.
    """

    text: str
    location: str
    hint: str = ""


def create_client(settings: Settings) -> httpx.AsyncClient:
    """Create the HTTP client shared by all URL profiles in one run."""
    return httpx.AsyncClient(
        timeout=settings.timeout,
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
    )


async def read_document(
    key: str,
    profile: Profile,
    settings: Settings,
    client: httpx.AsyncClient,
) -> RawDocument:
    """Read the document for *profile*; ``file`` takes precedence over ``url``.

    Raises:
        SourceError: If the document is missing or cannot be read.
    """
    if profile.file:
        return await read_file_document(key, profile.file, settings)
    return await fetch_url_document(key, profile.url or "", client)


async def read_file_document(key: str, file: str, settings: Settings) -> RawDocument:
    """Read a UTF-8 document from *file*, resolved against ``settings.cwd``."""
    path = settings.resolve(file)
    info(f"[{key}] Input swagger file : {path}")
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except FileNotFoundError as exc:
        raise SourceError(
            f"Cannot read swagger file '{file}': file not found.",
            reason=SourceFailure.MISSING,
            location=str(path),
            profile_key=key,
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceError(
            f"Cannot read swagger file '{file}': {exc}",
            reason=SourceFailure.UNREADABLE,
            location=str(path),
            profile_key=key,
        ) from exc
    return RawDocument(text=text, location=str(path), hint=_hint_from_suffix(path))


async def fetch_url_document(key: str, url: str, client: httpx.AsyncClient) -> RawDocument:
    """Fetch a document from *url* with a single ``GET``."""
    info(f"[{key}] Input swagger URL : {url}")
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        reason = (
            SourceFailure.MISSING if status in _MISSING_STATUSES else SourceFailure.NETWORK
        )
        raise SourceError(
            f"Cannot read swagger URL '{url}': HTTP {status}.",
            reason=reason,
            location=url,
            profile_key=key,
        ) from exc
    except httpx.InvalidURL as exc:
        raise SourceError(
            f"Cannot read swagger URL '{url}': invalid URL ({exc}).",
            reason=SourceFailure.NETWORK,
            location=url,
            profile_key=key,
        ) from exc
    except httpx.RequestError as exc:
        raise SourceError(
            f"Cannot read swagger URL '{url}': {exc}",
            reason=SourceFailure.NETWORK,
            location=url,
            profile_key=key,
        ) from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    else:
        hint = _hint_from_suffix(Path(httpx.URL(url).path))
    return RawDocument(text=response.text, location=url, hint=hint)


def _hint_from_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    return ""
