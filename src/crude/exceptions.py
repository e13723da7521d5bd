"""Exception hierarchy for crude.

All exceptions inherit from :class:`CrudeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`crude.exit_codes`.
The command-line entry point in :func:`crude.app.main` catches
``CrudeError`` and exits with the appropriate code.

Errors raised while composing a request (missing path variables, bad
resource declarations) are always raised before the transport is called.
The HTTP-flavoured errors are only produced by the bundled transports in
:mod:`crude.transport`; the core never interprets transport results.

Subclass hierarchy::

    CrudeError (exit 1)
    +-- MissingVariableError   (exit 2)
    +-- InvalidUsageError      (exit 2)
    +-- ConfigurationError     (exit 2)
    |   +-- UnknownResourceError  (also an AttributeError)
    +-- ConfigError            (exit 1)
    +-- AuthError              (exit 3)
    +-- NotFoundError          (exit 4)
    +-- ServerError            (exit 5)
    +-- TransportError         (exit 6)
"""

from __future__ import annotations

from crude.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class CrudeError(Exception):
    """Base exception for all crude errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`crude.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class MissingVariableError(CrudeError):
    """Raised when a ``{placeholder}`` in a URL template has no value.

    Attributes:
        variable: Name of the placeholder that could not be resolved.
        template: The template being expanded.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, variable: str, template: str = ""):
        super().__init__(f"No value provided for variable: {variable}")
        self.variable = variable
        self.template = template


class InvalidUsageError(CrudeError):
    """Raised for invalid CLI arguments (malformed ``key=value`` pairs, unknown operations)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigurationError(CrudeError):
    """Resources or nesting relations were declared improperly.

    Errors of this type are raised while an API is being declared or a
    request is being composed, never by the transport.
    """

    exit_code = EXIT_INVALID_USAGE


class UnknownResourceError(ConfigurationError, AttributeError):
    """Raised when an undeclared resource, nested accessor or behavior is looked up.

    Also an :class:`AttributeError` so that ``hasattr()`` and ``getattr()``
    with a default keep working on dynamic accessors.
    """


class ConfigError(CrudeError):
    """Raised for definition-file problems (missing file, invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class AuthError(CrudeError):
    """Raised by the bundled transports when the API answers HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(CrudeError):
    """Raised by the bundled transports when the API answers HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(CrudeError):
    """Raised by the bundled transports for any other HTTP error status."""

    exit_code = EXIT_SERVER_ERROR


class TransportError(CrudeError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_CONNECTION_ERROR
