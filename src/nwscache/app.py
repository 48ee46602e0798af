"""Typer application and CLI entry point for nwscache.

The root callback installs the global :class:`~nwscache.output.OutputManager`,
resolves the effective configuration, and sweeps the response cache once
before any command touches it (``cache.purge_on_start``).

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It maps :class:`~nwscache.exceptions.NwscacheError` to
its exit code and writes a crash log for anything unexpected.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from nwscache import __version__
from nwscache.commands.cache import cache_app
from nwscache.commands.config import config_app
from nwscache.commands.fetch import fetch_command, forecast_command
from nwscache.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED

app = typer.Typer(
    name="nwscache",
    help="Fetch National Weather Service API documents through a local TTL cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("fetch")(fetch_command)
app.command("forecast")(forecast_command)
app.add_typer(cache_app, name="cache", help="Inspect and purge the response cache.")
app.add_typer(config_app, name="config", help="Configuration management.")

# Commands that manage the cache or the config file themselves.
_NO_STARTUP = {"cache", "config"}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"nwscache {__version__}")
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
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the response cache."),
    user_agent: Optional[str] = typer.Option(
        None, "--user-agent", help="User-Agent header sent to the API."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Args:
        ctx: Typer invocation context; ``ctx.obj`` receives ``config`` and
            ``cache_root`` for the sub-commands.
        version: Print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        no_cache: Neither read nor write the response cache.
        user_agent: Override ``request.user_agent``.
    """
    from nwscache.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    if ctx.invoked_subcommand in _NO_STARTUP:
        return

    from nwscache.cache import purge_cache
    from nwscache.config import resolve_cache_root, resolve_config
    from nwscache.exceptions import ConfigError

    config = resolve_config(cli_user_agent=user_agent, cli_no_cache=no_cache)
    if fmt == OutputFormat.AUTO and config.output.format != OutputFormat.AUTO.value:
        try:
            configured = OutputFormat(config.output.format)
        except ValueError:
            raise ConfigError(f"Unknown output.format: {config.output.format}") from None
        set_output(
            OutputManager(
                format=configured,
                no_color=no_color,
                quiet=quiet,
                verbose=verbose,
            )
        )

    root = resolve_cache_root()
    if config.cache.enabled and config.cache.purge_on_start:
        purge_cache(root)

    ctx.obj["config"] = config
    ctx.obj["cache_root"] = root


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> Optional[str]:
    """Write the current traceback next to the config file.

    Returns:
        The log path, or ``None`` when there is no home directory or the
        log cannot be written.
    """
    from nwscache.config import config_path

    path = config_path()
    if path is None:
        return None
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = path.parent / f"nwscache-crash-{timestamp}.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_path.write_text(traceback.format_exc(), encoding="utf-8")
    except OSError:
        return None
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``nwscache`` console script.

    :class:`~nwscache.exceptions.NwscacheError` exits with the error's
    ``exit_code``; any other exception produces a crash log and exit 1.

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
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from nwscache.exceptions import NwscacheError
        from nwscache.output import error

        if isinstance(exc, NwscacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        if log_path:
            error(f"Unexpected error. Debug log: {log_path}")
        else:
            error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
