"""Exception hierarchy for swagger-refract.

All exceptions inherit from :class:`SwaggerRefractError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`swagger_refract.exit_codes`.  The command-line entry point catches
``SwaggerRefractError`` and exits with the matching code.

Problems *inside* a Swagger document are not exceptions: the element-tree
builder reports them as annotations on the parse result.  Exceptions are
reserved for input that cannot be turned into a document at all.

Subclass hierarchy::

    SwaggerRefractError       (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- SourceParseError      (exit 7)
    +-- SwaggerValidationError (exit 8)
    +-- ReferenceCycleError   (exit 1)
    +-- ConfigError           (exit 1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from swagger_refract.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SOURCE_PARSE_ERROR,
    EXIT_VALIDATION_FAILURE,
)

if TYPE_CHECKING:
    from swagger_refract.elements import ParseResult
    from swagger_refract.models import ValidationDetail


class SwaggerRefractError(Exception):
    """Base exception for all swagger-refract errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SwaggerRefractError):
    """Raised for invalid command-line arguments."""

    exit_code = EXIT_INVALID_USAGE


class SourceParseError(SwaggerRefractError):
    """Raised when the input cannot be read, decoded, or composed into an AST."""

    exit_code = EXIT_SOURCE_PARSE_ERROR


class SwaggerValidationError(SwaggerRefractError):
    """Raised when validation leaves no usable Swagger document.

    The validator also returns (rather than raises) an instance of this class
    for recoverable problems; in that case the caller turns each entry of
    :attr:`details` into a ``VALIDATION_ERROR`` annotation.

    Args:
        message: Summary of the failure.
        details: Individual validation problems, each optionally carrying
            nested ``inner`` problems.
        result: The partial parse result built before the failure, attached
            by :func:`swagger_refract.adapter.parse` for fatal errors.
    """

    exit_code = EXIT_VALIDATION_FAILURE

    def __init__(
        self,
        message: str,
        details: Optional[list[ValidationDetail]] = None,
        result: Optional[ParseResult] = None,
    ):
        super().__init__(message)
        self.details: list[ValidationDetail] = list(details or [])
        self.result = result


class ReferenceCycleError(SwaggerRefractError):
    """Raised when following internal ``$ref`` pointers revisits the same state."""

    def __init__(self, reference: str, path: Any = None):
        super().__init__(f"Reference cycle detected while following {reference}")
        self.reference = reference
        self.path = path


class ConfigError(SwaggerRefractError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
