"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~nwscache.exceptions.NwscacheError` subclass.
Shell wrappers can inspect the exit code to tell a network failure from an
undecodable response without parsing stderr.

Example::

    $ nwscache fetch https://api.weather.gov/points/39.7456,-97.0892
    $ echo $?
    10   # EXIT_CONNECTION_ERROR -- the API could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (also used for unparseable JSON bodies)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API answered with an error status."""

EXIT_CONNECTION_ERROR = 10
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 11
"""The response body could not be decoded as text."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
