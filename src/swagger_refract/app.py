"""Typer application and CLI entry point for swagger-refract.

This module wires together the top-level Typer application and registers
the built-in commands (``parse``, ``annotations``, ``detect``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  It installs a SIGINT handler, invokes the Typer app, and
maps :class:`~swagger_refract.exceptions.SwaggerRefractError` to its exit
code.

See Also:
    :mod:`swagger_refract.config`: Configuration resolution.
    :mod:`swagger_refract.output`: Output formatting initialised in
    :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any

import typer

from swagger_refract import __version__
from swagger_refract.commands.config import config_app
from swagger_refract.commands.parse import annotations_command, detect_command, parse_command
from swagger_refract.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="swagger-refract",
    help="Translate Swagger 2.0 documents into API element trees.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("parse")(parse_command)
app.command("annotations")(annotations_command)
app.command("detect")(detect_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"swagger-refract {__version__}")
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
        False, "--quiet", "-q", help="Suppress warnings and informational output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~swagger_refract.output.OutputManager`
    from CLI flags and stores them in ``ctx.obj`` so commands can rebuild
    the manager once the configured output format is known.
    """
    from swagger_refract.output import OutputFormat, OutputManager, set_output

    fmt = None
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(
            format=fmt or OutputFormat.AUTO,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    ctx.ensure_object(dict)
    ctx.obj["format"] = fmt
    ctx.obj["no_color"] = no_color
    ctx.obj["quiet"] = quiet
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``swagger-refract`` console script.

    :class:`~swagger_refract.exceptions.SwaggerRefractError` instances cause
    a clean exit with the error's ``exit_code``.  Any other exception is
    reported and exits with ``EXIT_GENERIC_FAILURE``.

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
        from swagger_refract.exceptions import SwaggerRefractError
        from swagger_refract.output import error

        if isinstance(exc, SwaggerRefractError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
