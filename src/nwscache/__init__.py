"""nwscache -- Fetch National Weather Service API documents through a TTL cache.

Responses from ``api.weather.gov`` carry an ``Expires`` header. This package
stores every fetched body on disk under that header and serves it again
until the named instant passes, so repeated lookups of a location cost no
network round trip.

Typical use::

    nwscache forecast 39.7456,-97.0892     # fetch, cache, print
    nwscache forecast 39.7456,-97.0892     # served from ~/.config/nwscache
    nwscache cache purge                   # drop expired entries

Modules:
    app: Typer application and CLI entry point.
    cache: Disk-backed response store and purger.
    client: httpx-based client for the weather API.
    fetch: Cache-first fetching.
    nws: Navigation helpers for NWS GeoJSON documents.
    models: Pydantic models shared across the package.
    config: Cache-root resolution and configuration handling.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
