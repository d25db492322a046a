"""Convert Swagger parameters into href-variable members.

**Mapping rules:**

* ``string`` becomes an empty :class:`~swagger_refract.elements.StringValue`.
* ``integer`` and ``number`` become a :class:`~swagger_refract.elements.NumberValue`.
* ``boolean`` becomes a :class:`~swagger_refract.elements.BooleanValue`.
* ``array`` becomes an :class:`~swagger_refract.elements.ArrayValue`.
* Anything else (including a missing ``type``) falls back to a string.

A declared ``default`` is attached to the value placeholder rather than to
the member, because it is the value that defaults, not the variable.
"""

from __future__ import annotations

from typing import Any, Callable

from swagger_refract.elements import (
    ArrayValue,
    BooleanValue,
    Member,
    NumberValue,
    StringValue,
)

_VALUE_FACTORIES: dict[str, Callable[[], Any]] = {
    "string": lambda: StringValue(content=""),
    "integer": NumberValue,
    "number": NumberValue,
    "boolean": BooleanValue,
    "array": ArrayValue,
}


def member_from_parameter(parameter: dict[str, Any]) -> Member:
    """Build a :class:`~swagger_refract.elements.Member` for *parameter*.

    Args:
        parameter: A dereferenced Swagger *Parameter Object*.

    Returns:
        A member keyed by the parameter name, holding a typed placeholder
        value.  The function has no side effects.

    Example::

        >>> member = member_from_parameter(
        ...     {"name": "limit", "in": "query", "type": "integer", "default": 20}
        ... )
        >>> member.value.element, member.value.default
        ('number', 20)
    """
    type_name = parameter.get("type")
    if not isinstance(type_name, str) or type_name not in _VALUE_FACTORIES:
        type_name = "string"
    value = _VALUE_FACTORIES[type_name]()

    if parameter.get("default") is not None:
        value.default = parameter["default"]

    return Member(
        key=str(parameter.get("name", "")),
        value=value,
        required=bool(parameter.get("required")),
        description=parameter.get("description") or None,
    )
