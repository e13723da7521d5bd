"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~crude.exceptions.CrudeError` subclass. Shell
wrappers can inspect the exit code of the ``crude`` command to tell a bad
resource declaration apart from a failed HTTP call without parsing stderr.

Example::

    $ crude call get comments 7 --in blogs=3
    $ echo $?
    4   # EXIT_NOT_FOUND -- the server answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including definition file problems)."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, bad resource declarations, or missing path variables."""

EXIT_AUTH_FAILURE = 3
"""The remote API rejected the request with HTTP 401 or 403."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP error status other than 401/403/404."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
