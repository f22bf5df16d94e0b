"""Value-to-text conversion for rendered placeholders.

Every value a placeholder resolves to is classified into one of a closed
set of kinds and converted by a fixed policy. The conversion never raises:
values that cannot be represented degrade to the configured fallback
strings (``invalid_type``, ``invalid_obj``), so one bad value cannot abort
an otherwise valid render.

Policy:
    | Kind         | Example                 | Output                      |
    |--------------|-------------------------|-----------------------------|
    | TEXT         | ``"hi"``                | unchanged                   |
    | BOOLEAN      | ``True``                | ``"true"`` / ``"false"``    |
    | NUMBER       | ``inf``, ``nan``, ``2.0`` | ``"∞"``, ``"NaN"``, ``"2"`` |
    | NULL         | ``None``                | ``""``                      |
    | ABSENT       | ``UNDEFINED``           | ``""``                      |
    | CUSTOM_TEXT  | type overriding __str__ | ``str(value)``              |
    | STRUCTURED   | ``{"a": 1}``            | ``'{"a":1}'`` (compact JSON) |
    | UNSUPPORTED  | functions, awaitables   | ``invalid_type``            |

"""

from __future__ import annotations

import inspect
import json
import logging
import math
from collections.abc import Callable, Mapping
from enum import Enum, auto
from numbers import Real
from typing import Any

from stache.options import StringifyOptions, coerce_options
from stache.path import UNDEFINED

logger = logging.getLogger(__name__)

_DEFAULT_OPTIONS = StringifyOptions()

# Beyond this magnitude an integral float is written in exponent form
_MAX_PLAIN_FLOAT = 1e21


class ValueKind(Enum):
    """Closed set of value kinds the stringifier distinguishes."""

    TEXT = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    NULL = auto()
    ABSENT = auto()
    CUSTOM_TEXT = auto()
    STRUCTURED = auto()
    UNSUPPORTED = auto()


def classify(value: Any) -> ValueKind:
    """Return the ValueKind that decides how ``value`` is rendered.

    Order matters: ``bool`` is checked before numbers (it subclasses
    ``int``), and callables before ``__str__`` overrides so that classes
    and callable objects always render as ``invalid_type``.
    """
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, Real):
        return ValueKind.NUMBER
    if value is None:
        return ValueKind.NULL
    if value is UNDEFINED:
        return ValueKind.ABSENT
    if callable(value) or inspect.isawaitable(value):
        return ValueKind.UNSUPPORTED
    if type(value).__str__ is not object.__str__:
        return ValueKind.CUSTOM_TEXT
    return ValueKind.STRUCTURED


def _number_to_text(value: Real) -> str:
    # Arbitrary-precision ints would overflow float(); str() itself raises
    # ValueError past sys.get_int_max_str_digits()
    if isinstance(value, int):
        return str(value)
    number = float(value)
    if math.isnan(number):
        return "NaN"
    if number == math.inf:
        return "∞"
    if number == -math.inf:
        return "-∞"
    if number.is_integer() and abs(number) < _MAX_PLAIN_FLOAT:
        return str(int(number))
    return repr(number)


def _own_properties(obj: Any) -> dict[str, Any]:
    """JSON fallback for plain objects: serialize their instance attributes."""
    try:
        attrs = vars(obj)
    except TypeError:
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable") from None
    return {key: val for key, val in attrs.items() if not key.startswith("_")}


def _finite(value: Any) -> Any:
    """Copy of ``value`` with NaN and infinities replaced by None."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {key: _finite(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(item) for item in value]
    return value


def _dumps(value: Any, default: Callable[[Any], Any]) -> str:
    return json.dumps(
        value,
        default=default,
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
    )


def _to_json(value: Any) -> str:
    try:
        return _dumps(value, _own_properties)
    except ValueError:
        # JSON has no NaN or Infinity: write them as null. Cycles raise
        # ValueError here too and fail again on the second pass.
        return _dumps(_finite(value), lambda obj: _finite(_own_properties(obj)))


def stringify(value: Any, options: StringifyOptions | Mapping[str, str] | None = None) -> str:
    """Convert a resolved placeholder value to text.

    Args:
        value: Any value produced by scope lookup or a resolver
        options: Fallback strings as an options object or a mapping;
            defaults to ``invalid_type=""`` and ``invalid_obj="{...}"``

    Returns:
        The text representation. Never raises.

    Example:
        >>> stringify(float("inf"))
        '∞'
        >>> stringify({"a": [1, 2]})
        '{"a":[1,2]}'
        >>> d = {}
        >>> d["self"] = d
        >>> stringify(d)
        '{...}'
    """
    opts = _DEFAULT_OPTIONS if options is None else coerce_options(options, StringifyOptions)

    match classify(value):
        case ValueKind.TEXT:
            return value
        case ValueKind.BOOLEAN:
            return "true" if value else "false"
        case ValueKind.NUMBER:
            try:
                return _number_to_text(value)
            except ValueError as e:
                logger.debug(f"Cannot convert {type(value).__name__} to text: {e}")
                return opts.invalid_obj
        case ValueKind.NULL | ValueKind.ABSENT:
            return ""
        case ValueKind.CUSTOM_TEXT:
            try:
                return str(value)
            except Exception as e:
                logger.debug(f"__str__ of {type(value).__name__} failed: {e}")
                return opts.invalid_obj
        case ValueKind.STRUCTURED:
            try:
                return _to_json(value)
            except (TypeError, ValueError, RecursionError) as e:
                logger.debug(f"Cannot serialize {type(value).__name__}: {e}")
                return opts.invalid_obj
        case _:
            return opts.invalid_type
