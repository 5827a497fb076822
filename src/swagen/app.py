"""Typer application and CLI entry point for swagen.

Commands:

* ``generate`` -- run every profile (or the named ones) in the configuration.
* ``init`` -- write a starter ``swagen.config.json``.
* ``profiles`` -- list the configured profiles.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler, invokes the Typer app, and
maps :class:`~swagen.exceptions.SwagenError` to its exit code. Other
exceptions are written to a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from swagen import __version__
from swagen.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PROFILE_FAILURE,
)

app = typer.Typer(
    name="swagen",
    help="Generate API client code from Swagger/OpenAPI documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"swagen {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    cwd: Optional[Path] = typer.Option(
        None,
        "--cwd",
        help="Directory that profile paths are resolved against (default: current).",
        file_okay=False,
        exists=True,
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~swagen.output.OutputManager` and stores the
    working directory in ``ctx.obj`` for sub-commands.
    """
    from swagen.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["cwd"] = cwd


def _settings(ctx: typer.Context) -> Any:
    from swagen.config import Settings

    obj = ctx.obj or {}
    return Settings.from_env(obj.get("cwd"))


@app.command("generate")
def generate_command(
    ctx: typer.Context,
    profiles: Optional[list[str]] = typer.Argument(
        None, help="Only run these profiles (default: all)."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (skips discovery)."
    ),
) -> None:
    """Generate code for every profile in the configuration.

    Each profile is processed independently: a failing profile is reported
    and the others still run. Exits with code 4 if any profile failed.
    """
    from swagen.config import load_config
    from swagen.orchestrator import run_profiles
    from swagen.output import error, info

    settings = _settings(ctx)
    if config_path is not None and not config_path.is_absolute():
        config_path = settings.cwd / config_path
    config = load_config(settings.cwd, config_path)

    if profiles:
        unknown = [name for name in profiles if name not in config]
        if unknown:
            error(f"Unknown profile(s): {', '.join(unknown)}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        config = {key: value for key, value in config.items() if key in profiles}

    summary = run_profiles(settings, config)

    info(
        f"{len(summary.succeeded)} generated, {len(summary.failed)} failed, "
        f"{len(summary.skipped)} skipped."
    )
    if not summary.ok:
        raise typer.Exit(code=EXIT_PROFILE_FAILURE)


@app.command("profiles")
def profiles_command(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (skips discovery)."
    ),
) -> None:
    """List the profiles in the configuration."""
    from swagen.config import load_config
    from swagen.output import print_table

    settings = _settings(ctx)
    if config_path is not None and not config_path.is_absolute():
        config_path = settings.cwd / config_path
    config = load_config(settings.cwd, config_path)

    rows: list[list[str]] = []
    for key, data in config.items():
        data = data if isinstance(data, dict) else {}
        rows.append(
            [
                key,
                str(data.get("file") or data.get("url") or ""),
                str(data.get("generator") or ""),
                str(data.get("output") or ""),
                "yes" if data.get("skip") else "no",
            ]
        )
    print_table(["Profile", "Source", "Generator", "Output", "Skip"], rows, title="Profiles")


from swagen.commands.init import init_command  # noqa: E402

app.command("init")(init_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from swagen.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``swagen`` console script.

    :class:`~swagen.exceptions.SwagenError` instances (notably a missing
    configuration file) are printed with any remediation text and exit with
    the error's ``exit_code``. All other exceptions produce a crash log and a
    generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from swagen.exceptions import DiscoveryError, SwagenError
        from swagen.output import error, suggest

        if isinstance(exc, SwagenError):
            error(str(exc))
            if isinstance(exc, DiscoveryError) and exc.remediation:
                for line in exc.remediation.splitlines():
                    suggest(line)
            sys.exit(exc.exit_code)

        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
