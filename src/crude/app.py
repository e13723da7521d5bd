"""Typer application and CLI entry point for crude.

This module wires together the top-level Typer application and registers
the built-in sub-commands:

* ``init`` -- write a starter ``crude.json`` definition.
* ``pluralize`` / ``resources`` -- inspect names and declarations.
* ``url`` / ``call`` -- build or send a request for a resource operation.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler, invokes the Typer app,
and turns any :class:`~crude.exceptions.CrudeError` that escapes a command
into an error message and the error's exit code.

See Also:
    :mod:`crude.config`: Definition file resolution.
    :mod:`crude.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from crude import __version__
from crude.commands.init import init_command
from crude.commands.inspect import pluralize_command, resources_command
from crude.commands.request import call_command, url_command
from crude.exit_codes import EXIT_GENERIC_FAILURE

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="crude",
    help="Build and send REST resource requests from a declared API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("init")(init_command)
app.command("pluralize")(pluralize_command)
app.command("resources")(resources_command)
app.command("url")(url_command)
app.command("call")(call_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"crude {__version__}")
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
    definition: Optional[str] = typer.Option(
        None, "--definition", "-d", help="Definition file (default: ./crude.json)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the definition's base URL."
    ),
    url_format: Optional[str] = typer.Option(
        None, "--format", help="Override the format suffix ('' to omit)."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~crude.output.OutputManager` from CLI
    flags and stores the definition overrides in the Typer context so that
    sub-commands can read them via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        definition: Definition file path (highest precedence).
        base_url: Base URL override.
        url_format: Format suffix override.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from crude.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["definition"] = definition
    ctx.obj["base_url"] = base_url
    ctx.obj["format"] = url_format
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``crude`` console script.

    Unhandled :class:`~crude.exceptions.CrudeError` instances cause a clean
    exit with the error's ``exit_code``. Any other exception is logged with
    its traceback and produces a generic failure exit.

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
        from crude.exceptions import CrudeError
        from crude.output import error

        if isinstance(exc, CrudeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        logger.debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
