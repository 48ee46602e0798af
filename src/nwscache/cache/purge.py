"""Sweep the cache root for expired entries and exhausted key directories.

Meant to run once at start-up, before any lookup, to reclaim the space left
by earlier runs. It takes no lock and must not run while another process is
reading or writing the same root.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from nwscache.cache.expiry import check_entry, utcnow
from nwscache.models import PurgeReport
from nwscache.output import debug, error


def purge_cache(root: Path, now: Optional[datetime] = None) -> PurgeReport:
    """Delete expired entries under *root* and drop directories left empty.

    Every directory directly under *root* is taken to be a key directory;
    other files at the root are skipped. Inside a key directory each file
    goes through :func:`~nwscache.cache.expiry.check_entry`. The directory
    itself is removed when it held nothing to begin with or when every
    entry it held was invalid. A sub-directory counts as an entry that is
    never invalid, so its parent survives.

    Errors are logged and the failing step skipped; the sweep never raises.

    Returns:
        Counters for the sweep.
    """
    report = PurgeReport()
    now = now or utcnow()

    if not root.is_dir():
        debug(f'Config dir "{root}" doesn\'t exist; nothing to purge.')
        return report

    try:
        candidates = list(root.iterdir())
    except OSError as exc:
        error(f'Error reading "{root}": {exc}')
        return report

    for key_dir in candidates:
        if not key_dir.is_dir():
            continue
        report.directories_scanned += 1

        try:
            children = list(key_dir.iterdir())
        except OSError as exc:
            error(f'Error reading "{key_dir}": {exc}')
            continue

        invalid = 0
        for child in children:
            if child.is_file() and not check_entry(child, now):
                invalid += 1
        report.entries_removed += invalid

        if not children or invalid == len(children):
            try:
                key_dir.rmdir()
            except OSError as exc:
                error(f'Error deleting empty directory "{key_dir}": {exc}')
                continue
            report.directories_removed += 1
            debug(f'Removed cache directory "{key_dir}"')

    return report
