"""Placeholder path parsing and scope lookup.

A placeholder expression such as ``user.tags[0]`` is parsed once into a
path (``("user", "tags", "0")``) which is then walked against the scope on
every render.

Supported syntax:
    - Dotted names: ``a.b.c``
    - Numeric brackets: ``items[0]``
    - Quoted brackets: ``data["first name"]``, ``data['x']``

Lookup order per step:
    - Mappings: subscript
    - Sequences (not str): integer index, negative indices excluded
    - Other objects: attribute access

Dunder names (``__class__``, ``__globals__``...) are never resolved, so a
scope object cannot leak interpreter internals into rendered output.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

from stache.exceptions import ErrorCode, TemplateSyntaxError, UndefinedError
from stache.utils.predicates import assert_type

Path = tuple[str, ...]


class _Undefined:
    """Sentinel for a value that is absent from the scope.

    Renders as an empty string and is falsy, but is distinct from ``None``
    (which is a value the scope explicitly holds).
    """

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


def _path_error(message: str, expression: str, col: int, code: ErrorCode) -> TemplateSyntaxError:
    return TemplateSyntaxError(
        f"{message} in path '{expression}'",
        lineno=1,
        col_offset=col,
        source=expression,
        code=code,
    )


@lru_cache(maxsize=1024)
def _parse(expression: str) -> Path:
    steps: list[str] = []
    i = 0
    n = len(expression)
    # True right after "." or at the start: a name must follow
    expect_name = True

    while i < n:
        ch = expression[i]
        if ch.isspace():
            i += 1
            continue

        if ch == ".":
            if expect_name:
                raise _path_error("Empty segment", expression, i, ErrorCode.INVALID_PATH)
            expect_name = True
            i += 1
            continue

        if ch == "[":
            if expect_name and steps:
                raise _path_error("Unexpected '['", expression, i, ErrorCode.INVALID_PATH)
            j = i + 1
            while j < n and expression[j].isspace():
                j += 1
            if j < n and expression[j] in "\"'":
                quote = expression[j]
                end = expression.find(quote, j + 1)
                if end == -1:
                    raise _path_error(
                        f"Missing closing {quote}", expression, j, ErrorCode.INVALID_PATH
                    )
                step = expression[j + 1 : end]
                close = expression.find("]", end + 1)
                if close == -1 or expression[end + 1 : close].strip():
                    raise _path_error("Missing ']'", expression, end + 1, ErrorCode.INVALID_PATH)
            else:
                close = expression.find("]", j)
                if close == -1:
                    raise _path_error("Missing ']'", expression, i, ErrorCode.INVALID_PATH)
                step = expression[j:close].strip()
                if not step.isdecimal():
                    raise _path_error(
                        f"Invalid index '{step}'", expression, j, ErrorCode.INVALID_PATH
                    )
            steps.append(step)
            expect_name = False
            i = close + 1
            continue

        if ch == "]":
            raise _path_error("Unexpected ']'", expression, i, ErrorCode.INVALID_PATH)

        if not expect_name:
            raise _path_error(
                "Expected '.' or '[' before name", expression, i, ErrorCode.INVALID_PATH
            )
        j = i
        while j < n and expression[j] not in ".[]":
            j += 1
        steps.append(expression[i:j].strip())
        expect_name = False
        i = j

    if expect_name and steps:
        raise _path_error("Trailing '.'", expression, n - 1, ErrorCode.INVALID_PATH)
    return tuple(steps)


def to_path(expression: str, *, max_depth: int = 10) -> Path:
    """Parse a placeholder expression into its property-access steps.

    Results are memoized; parsing the same expression twice is a cache hit.

    Example:
        >>> to_path("a.b[0]['c d']")
        ('a', 'b', '0', 'c d')
        >>> to_path("")
        ()

    Raises:
        InvalidArgumentError: If expression is not a string
        TemplateSyntaxError: If the expression is malformed or has more
            than ``max_depth`` steps
    """
    assert_type(
        isinstance(expression, str),
        "Expected a placeholder expression string but got",
        expression,
    )
    path = _parse(expression)
    if len(path) > max_depth:
        raise _path_error(
            f"Path has {len(path)} steps, more than the maximum of {max_depth}",
            expression,
            0,
            ErrorCode.PATH_TOO_DEEP,
        )
    return path


def _step(current: Any, key: str) -> Any:
    """Resolve one path step, returning UNDEFINED when it does not exist."""
    if isinstance(current, Mapping):
        try:
            return current[key]
        except KeyError:
            return UNDEFINED
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes, bytearray)):
        if key.isdecimal():
            index = int(key)
            if index < len(current):
                return current[index]
        return UNDEFINED
    if key.startswith("__") and key.endswith("__"):
        return UNDEFINED
    return getattr(current, key, UNDEFINED)


def _available_names(current: Any) -> frozenset[str] | None:
    if isinstance(current, Mapping):
        return frozenset(str(key) for key in current)
    if hasattr(current, "__dict__"):
        return frozenset(name for name in vars(current) if not name.startswith("_"))
    return None


def get_keys(scope: Any, path: Path, *, strict: bool = False) -> Any:
    """Walk ``path`` against ``scope`` and return the value found.

    A missing step yields ``UNDEFINED``; so does walking through ``None``.
    In strict mode a missing step raises UndefinedError instead.

    Example:
        >>> get_keys({"a": {"b": [10, 20]}}, ("a", "b", "1"))
        20
        >>> get_keys({"a": {}}, ("a", "x"))
        UNDEFINED
    """
    current = scope
    for key in path:
        if current is None or current is UNDEFINED:
            value = UNDEFINED
        else:
            value = _step(current, key)
        if value is UNDEFINED:
            if strict:
                raise UndefinedError(path, key, _available_names(current))
            return UNDEFINED
        current = value
    return current


def get(scope: Any, expression: str, *, strict: bool = False) -> Any:
    """Parse ``expression`` and look it up in ``scope``.

    Example:
        >>> get({"user": {"name": "Ada"}}, "user.name")
        'Ada'
    """
    return get_keys(scope, to_path(expression), strict=strict)
