"""Parse commands -- translate, detect, and inspect Swagger 2.0 sources.

``parse`` writes the serialized parse result to stdout (or ``-o FILE``) and
reports every annotation on stderr.  ``annotations`` prints only the
diagnostics, as a table.  ``detect`` answers with its exit status.

Example::

    swagger-refract parse petstore.yaml --source-map -o petstore.refract.json
    swagger-refract --json annotations petstore.yaml
    swagger-refract detect petstore.yaml && echo "Swagger 2.0"
"""

from __future__ import annotations

from typing import Optional

import typer

from swagger_refract.elements import ParseResult
from swagger_refract.exceptions import SwaggerRefractError, SwaggerValidationError
from swagger_refract.exit_codes import EXIT_DIAGNOSTIC_ERRORS, EXIT_GENERIC_FAILURE
from swagger_refract.models import GlobalConfig, ValidationDetail
from swagger_refract.output import (
    OutputFormat,
    OutputManager,
    annotation,
    debug,
    error,
    get_output,
    info,
    print_result,
    print_table,
    set_output,
    success,
)


def _apply_configured_format(ctx: typer.Context, config: GlobalConfig) -> None:
    """Reinstall the output manager with the configured format.

    Only applies when neither ``--json`` nor ``--plain`` was given.
    """
    obj = ctx.obj or {}
    if obj.get("format") is not None or config.output.format == "auto":
        return
    set_output(
        OutputManager(
            format=OutputFormat(config.output.format),
            no_color=obj.get("no_color", False),
            quiet=obj.get("quiet", False),
            verbose=obj.get("verbose", False),
        )
    )


def _describe(detail: ValidationDetail) -> str:
    location = "/".join(str(segment) for segment in detail.path)
    return f"{location}: {detail.message}" if location else detail.message


def _report_validation_failure(exc: SwaggerValidationError) -> None:
    if exc.result is not None:
        for item in exc.result.annotations:
            annotation(item)
    pending = list(exc.details)
    while pending:
        detail = pending.pop(0)
        error(_describe(detail))
        pending.extend(detail.inner)


def _run_parse(source: str, config: GlobalConfig) -> ParseResult:
    """Load *source* and translate it, reporting fatal validation problems."""
    from swagger_refract.adapter import parse
    from swagger_refract.parser.loader import read_source

    text = read_source(source)
    debug(f"Read {len(text)} characters from {source}")
    try:
        return parse(text, config=config)
    except SwaggerValidationError as exc:
        _report_validation_failure(exc)
        raise


def parse_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Swagger 2.0 document: file path, URL, or '-' for stdin."),
    source_map: Optional[bool] = typer.Option(
        None,
        "--source-map/--no-source-map",
        help="Attach source maps to elements and annotations.",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Exit non-zero when the result holds error annotations.",
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the result to a file instead of stdout."
    ),
) -> None:
    """Translate a Swagger 2.0 document into an API element tree.

    Args:
        ctx: Typer context carrying the global output flags.
        source: File path, URL, or ``-`` for stdin.
        source_map: Override the configured source-map setting.
        strict: Override the configured strict setting.
        output_file: Destination file for the serialized result.

    Raises:
        typer.Exit: With ``EXIT_DIAGNOSTIC_ERRORS`` in strict mode when the
            result holds error annotations.
    """
    from swagger_refract.config import resolve_config

    config = resolve_config(cli_source_map=source_map, cli_strict=strict)
    _apply_configured_format(ctx, config)

    result = _run_parse(source, config)
    print_result(result.to_dict(), output_file)

    for item in result.annotations:
        annotation(item)
    if output_file:
        success(f"Wrote {output_file}")

    if config.strict and result.errors:
        error(f"{len(result.errors)} error annotation(s) in strict mode")
        raise typer.Exit(code=EXIT_DIAGNOSTIC_ERRORS)


def annotations_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Swagger 2.0 document: file path, URL, or '-' for stdin."),
    source_map: Optional[bool] = typer.Option(
        None,
        "--source-map/--no-source-map",
        help="Resolve annotation offsets in the source.",
    ),
) -> None:
    """List the annotations produced for a Swagger 2.0 document.

    Example::

        swagger-refract annotations petstore.yaml --source-map
    """
    from swagger_refract.config import resolve_config

    config = resolve_config(cli_source_map=source_map)
    _apply_configured_format(ctx, config)

    result = _run_parse(source, config)
    rows = []
    for item in result.annotations:
        offset = length = ""
        if item.source_map is not None:
            offset = str(item.source_map.offset)
            length = str(item.source_map.length)
        rows.append([str(item.code), item.severity, item.message, offset, length])

    if not rows:
        info("No annotations.")
        return
    print_table(
        ["code", "severity", "message", "offset", "length"],
        rows,
        title="Annotations",
    )


def detect_command(
    source: str = typer.Argument(help="Document to check: file path, URL, or '-' for stdin."),
) -> None:
    """Check whether a document is Swagger 2.0.

    Exits with status 0 when it is and 1 when it is not.
    """
    from swagger_refract.adapter import detect
    from swagger_refract.parser.loader import read_source

    try:
        text = read_source(source)
    except SwaggerRefractError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if detect(text):
        if get_output().format == OutputFormat.JSON:
            print_result({"source": source, "swagger": True})
        else:
            success(f"{source} is a Swagger 2.0 document")
        return

    if get_output().format == OutputFormat.JSON:
        print_result({"source": source, "swagger": False})
    else:
        info(f"{source} is not a Swagger 2.0 document")
    raise typer.Exit(code=EXIT_GENERIC_FAILURE)
