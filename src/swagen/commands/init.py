"""Init command -- add a profile to ``swagen.config.json``.

Implements the ``swagen init`` top-level command. It builds one profile from
command-line options, runs the same structural checks ``swagen generate``
would, and writes it into ``swagen.config.json`` in the working directory,
creating the file if needed. No document is fetched.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer

from swagen.exit_codes import EXIT_INVALID_USAGE
from swagen.output import error, info, success, suggest


def init_command(
    ctx: typer.Context,
    generator: str = typer.Option(
        ..., "--generator", "-g", help="Generator name or local path (./my_generator.py)."
    ),
    output: str = typer.Option(..., "--output", "-o", help="Generated file path."),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Local document path."),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Document URL."),
    name: str = typer.Option("default", "--name", "-n", help="Profile name."),
    force: bool = typer.Option(
        False, "--force", help="Replace an existing profile with the same name."
    ),
) -> None:
    """Add a profile to ``swagen.config.json`` in the working directory.

    Exactly one of ``--file`` and ``--url`` must be given.

    Raises:
        typer.Exit: With code 2 if the options are inconsistent, the profile
            fails validation, a script-form configuration already exists, or
            the profile exists and ``--force`` was not given.

    Example::

        swagen init --file petstore.json --generator typescript --output src/petstore.ts
        swagen init --url https://petstore.swagger.io/v2/swagger.json \\
            --generator ./generators/kotlin.py --output Petstore.kt --name petstore
    """
    from swagen.config import (
        CONFIG_JSON_FILENAME,
        CONFIG_SCRIPT_FILENAME,
        Settings,
        atomic_write,
    )
    from swagen.exceptions import ConfigurationError
    from swagen.validator import validate_profile

    settings = Settings.from_env((ctx.obj or {}).get("cwd"))

    if bool(file) == bool(url):
        error("Specify exactly one of --file or --url.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    script_path = settings.cwd / CONFIG_SCRIPT_FILENAME
    if script_path.is_file():
        error(f"{script_path} exists; add the profile to that script instead.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    profile: dict[str, Any] = {"file": file} if file else {"url": url}
    profile.update({"output": output, "generator": generator})

    try:
        validate_profile(name, dict(profile))
    except ConfigurationError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    config_path = settings.cwd / CONFIG_JSON_FILENAME
    config: dict[str, Any] = {}
    if config_path.is_file():
        try:
            config = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            error(f"Cannot read {config_path}: {exc}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
        if not isinstance(config, dict):
            error(f"{config_path} does not contain a profile mapping.")
            raise typer.Exit(code=EXIT_INVALID_USAGE)

    if name in config:
        if not force:
            error(f'Profile "{name}" already exists in {config_path}.')
            suggest("Use --force to replace it, or --name to pick another name.")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        info(f'Profile "{name}" already exists and will be overwritten.')

    config[name] = profile
    atomic_write(config_path, json.dumps(config, indent=4) + "\n")

    success(f'Profile "{name}" written to {config_path}')
    suggest("Run: swagen generate")
