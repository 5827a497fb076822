"""Configuration discovery, runtime settings, and atomic file writes.

This module handles everything swagen reads or writes outside of a single
profile's pipeline:

* **Discovery** -- :func:`discover_config` looks for ``swagen.config.py``
  (script form, preferred) or ``swagen.config.json`` in the working
  directory. :func:`load_config` executes or parses the file and returns
  the raw profile mapping.
* **Settings** -- :class:`Settings` carries the working directory and
  transport settings explicitly, so no part of the pipeline consults the
  process-wide current directory.
* **Atomic writes** -- :func:`atomic_write` is used for generated
  artifacts, debug dumps and the ``init`` scaffold.
"""

from __future__ import annotations

import importlib.util
import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from swagen import __version__
from swagen.exceptions import DiscoveryError

_APP_NAME = "swagen"
CONFIG_SCRIPT_FILENAME = "swagen.config.py"
CONFIG_JSON_FILENAME = "swagen.config.json"
CONFIG_FILENAMES = (CONFIG_SCRIPT_FILENAME, CONFIG_JSON_FILENAME)


# --- Settings ---


class Settings(BaseModel):
    """Explicit runtime settings threaded into every path and network call.

    Attributes:
        cwd: Directory that profile paths (``file``, ``output``,
            ``debug.definition``, local generator paths) are resolved against.
        timeout: Transport timeout in seconds for URL documents.
        user_agent: ``User-Agent`` header sent when fetching URL documents.
    """

    cwd: Path
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    user_agent: str = f"{_APP_NAME}/{__version__}"

    @classmethod
    def from_env(cls, cwd: Optional[Path] = None) -> Settings:
        """Build settings for *cwd* (default: the process working directory).

        ``SWAGEN_TIMEOUT`` overrides the transport timeout.
        """
        values: dict[str, Any] = {"cwd": (cwd or Path.cwd()).resolve()}
        env_timeout = os.environ.get("SWAGEN_TIMEOUT")
        if env_timeout:
            try:
                values["timeout"] = float(env_timeout)
            except ValueError:
                raise DiscoveryError(
                    f"SWAGEN_TIMEOUT must be a number of seconds, got {env_timeout!r}"
                ) from None
        return cls(**values)

    def resolve(self, path: str) -> Path:
        """Resolve *path* against :attr:`cwd`; absolute paths are returned as-is."""
        return (self.cwd / path).resolve()


# --- Discovery ---


def _remediation() -> str:
    return "\n".join(
        [
            "To create a configuration file in the current directory, run:",
            "",
            "    swagen init --file <document> --generator <name> --output <path>",
            "",
            "Or write a swagen.config.json file that maps profile names to "
            "file/url, generator and output settings.",
        ]
    )


def discover_config(cwd: Path) -> Path:
    """Return the configuration file in *cwd*, preferring the script form.

    Raises:
        DiscoveryError: If neither ``swagen.config.py`` nor
            ``swagen.config.json`` exists.
    """
    for filename in CONFIG_FILENAMES:
        candidate = cwd / filename
        if candidate.is_file():
            return candidate
    raise DiscoveryError(
        f"Specify a {CONFIG_SCRIPT_FILENAME} or {CONFIG_JSON_FILENAME} file "
        f"in {cwd} to configure the swagen tool.",
        remediation=_remediation(),
    )


def load_config(cwd: Path, path: Optional[Path] = None) -> dict[str, Any]:
    """Load the profile mapping from *path*, or from the discovered config file.

    Args:
        cwd: Working directory used for discovery.
        path: Explicit configuration file; skips discovery when given.

    Returns:
        A mapping of profile name to the raw (unvalidated) profile mapping,
        in file order.

    Raises:
        DiscoveryError: If no file is found, the file cannot be read or
            executed, or its top level is not a mapping.
    """
    if path is None:
        path = discover_config(cwd)
    elif not path.is_file():
        raise DiscoveryError(
            f"Configuration file not found: {path}", remediation=_remediation()
        )

    if path.suffix == ".py":
        data = _load_script_config(path)
    else:
        data = _load_json_config(path)

    if not isinstance(data, dict):
        raise DiscoveryError(
            f"Configuration in {path} must map profile names to profiles "
            f"(got {type(data).__name__})"
        )
    return data


def _load_json_config(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DiscoveryError(f"Cannot read configuration {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DiscoveryError(
            f"Invalid JSON in {path} at line {exc.lineno}: {exc.msg}"
        ) from exc


def _load_script_config(path: Path) -> Any:
    """Execute a ``swagen.config.py`` file and return its ``config`` attribute."""
    spec = importlib.util.spec_from_file_location("swagen_user_config", path)
    if spec is None or spec.loader is None:
        raise DiscoveryError(f"Cannot load configuration script {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise DiscoveryError(
            f"Configuration script {path} failed: {type(exc).__name__}: {exc}"
        ) from exc

    if not hasattr(module, "config"):
        raise DiscoveryError(
            f"Configuration script {path} must define a module-level 'config' mapping"
        )
    return module.config


# --- XDG data directory (crash logs) ---


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/swagen/`` (default ``~/.local/share/swagen/``).
    On macOS/Windows: ``~/.swagen/``.
    """
    system = platform.system()
    if system == "Linux" or system.endswith("BSD"):
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using a temp file + rename.

    The text is written verbatim: no newline translation and no trailing
    newline is added. Parent directories are created as needed. On failure
    the temp file is removed and the original exception propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
