"""Cache commands -- inspect and sweep the on-disk response cache.

Provides the ``nwscache cache`` sub-command group. All commands resolve the
cache root from ``HOME`` at invocation time; without a home directory they
report the discard path and do nothing.
"""

from __future__ import annotations

import typer

from nwscache.output import format_response, get_output, info, print_data, print_table, success

cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("path")
def cache_path() -> None:
    """Print the cache root directory."""
    from nwscache.config import resolve_cache_root

    print_data(str(resolve_cache_root()))


@cache_app.command("purge")
def cache_purge() -> None:
    """Delete expired entries and key directories left empty.

    Example::

        nwscache cache purge
        nwscache --json cache purge
    """
    from nwscache.cache import purge_cache
    from nwscache.config import resolve_cache_root
    from nwscache.output import OutputFormat

    report = purge_cache(resolve_cache_root())
    if get_output().format == OutputFormat.JSON:
        format_response(report.model_dump())
        return
    success(
        f"Removed {report.entries_removed} expired entries and "
        f"{report.directories_removed} of {report.directories_scanned} directories."
    )


@cache_app.command("list")
def cache_list() -> None:
    """List cached entries with their expiry, size and state.

    Listing never deletes anything; expired entries are only shown as such.
    """
    from nwscache.cache import ResponseCache
    from nwscache.cache.keys import PLACEHOLDER
    from nwscache.config import resolve_cache_root

    entries = ResponseCache(resolve_cache_root()).entries()
    if not entries:
        info("Cache is empty.")
        return

    rows = [
        [
            entry.key.replace(PLACEHOLDER, "/"),
            entry.name,
            str(entry.size),
            "expired" if entry.expired else "fresh",
        ]
        for entry in entries
    ]
    print_table(["URL", "Expires", "Bytes", "State"], rows, title="Cached responses")
