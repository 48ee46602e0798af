"""Exception hierarchy for nwscache.

All exceptions inherit from :class:`NwscacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`nwscache.exit_codes`.
The top-level error handler in :func:`nwscache.app.main` catches
``NwscacheError`` and exits with the appropriate code.

Storage problems are deliberately absent from this hierarchy: the cache
reports them as :class:`~nwscache.models.CacheResult` values and never
raises. Only a miss that cannot be served from the network ends up here.

Subclass hierarchy::

    NwscacheError            (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- ConfigError          (exit 1)
    +-- NotFoundError        (exit 4)
    +-- ServerError          (exit 5)
    +-- FetchConnectionError (exit 10)
    +-- ResponseDecodeError  (exit 11)
    +-- ResponseParseError   (exit 1)
"""

from nwscache.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class NwscacheError(Exception):
    """Base exception for all nwscache errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`nwscache.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(NwscacheError):
    """Raised for invalid CLI arguments (e.g. a malformed ``LAT,LON`` pair)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(NwscacheError):
    """Raised when the config file is invalid or cannot be written."""

    exit_code = EXIT_GENERIC_FAILURE


class NotFoundError(NwscacheError):
    """Raised when the API returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(NwscacheError):
    """Raised when the API returns any other error status (4xx/5xx)."""

    exit_code = EXIT_SERVER_ERROR


class FetchConnectionError(NwscacheError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_CONNECTION_ERROR


class ResponseDecodeError(NwscacheError):
    """Raised when a response body cannot be decoded as text."""

    exit_code = EXIT_DECODE_ERROR


class ResponseParseError(NwscacheError):
    """Raised when a response body is not valid JSON."""

    exit_code = EXIT_GENERIC_FAILURE
