"""Numeric process exit codes for the ``swagger-refract`` command line.

Each constant maps to a failure category and is referenced by the matching
:class:`~swagger_refract.exceptions.SwaggerRefractError` subclass, so shell
scripts can branch on the exit status without parsing stderr.

Example::

    $ swagger-refract parse --strict broken.yaml
    $ echo $?
    3   # EXIT_DIAGNOSTIC_ERRORS -- the result holds error annotations
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_DIAGNOSTIC_ERRORS = 3
"""``--strict`` was given and the result contains error-severity annotations."""

EXIT_SOURCE_PARSE_ERROR = 7
"""The input could not be loaded or decoded."""

EXIT_VALIDATION_FAILURE = 8
"""Validation produced no usable Swagger document."""
