"""Type predicates and argument assertions.

Used at the public entry points to fail fast on programmer errors before
any rendering work happens.

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from stache.exceptions import InvalidArgumentError


def is_resolver(value: Any) -> bool:
    """Test if value can be used as a resolver override."""
    return callable(value)


def is_options_object(value: Any) -> bool:
    """Test if value is acceptable as an options argument.

    ``None`` (use defaults), any options dataclass, or a mapping of option
    names to values.
    """
    from stache.options import StringifyOptions

    return value is None or isinstance(value, (StringifyOptions, Mapping))


def assert_type(condition: bool, message: str, value: Any) -> None:
    """Raise InvalidArgumentError carrying ``value`` when condition is false.

    Example:
        >>> assert_type(callable(fn), "Expected a resolver function but got", fn)
    """
    if not condition:
        raise InvalidArgumentError(message, value)
