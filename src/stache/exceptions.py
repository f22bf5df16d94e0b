"""Exceptions for the Stache rendering engine.

Exception Hierarchy:
StacheError (base)
├── InvalidArgumentError      # Input-contract violation (also a TypeError)
├── TemplateSyntaxError       # Tokenizer or path parse failure
├── TokenStreamError          # literals/placeholders count mismatch (also a ValueError)
└── UndefinedError            # Missing key in strict mode (also a KeyError)

Value-conversion problems (unsupported types, circular objects) are never
raised. The stringifier degrades them to the configured fallback strings.

Example:
    ```
    S-LEX-001: Missing '}}' after '{{' opened at <template>:1:6
       |
      1 | Hello {{ name
       |       ^
    ```

"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for Stache errors.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: ARG (argument checks), LEX (tokenizer), PTH (path parsing),
    RUN (rendering)
    """

    # Argument errors (S-ARG-xxx)
    INVALID_ARGUMENT = "S-ARG-001"

    # Tokenizer errors (S-LEX-xxx)
    UNCLOSED_TAG = "S-LEX-001"
    NESTED_TAG = "S-LEX-002"
    VAR_NAME_TOO_LONG = "S-LEX-003"

    # Path errors (S-PTH-xxx)
    INVALID_PATH = "S-PTH-001"
    PATH_TOO_DEEP = "S-PTH-002"

    # Runtime errors (S-RUN-xxx)
    UNDEFINED_VARIABLE = "S-RUN-001"
    TOKEN_STREAM_MISMATCH = "S-RUN-002"

    @property
    def category(self) -> str:
        """Error category (e.g., 'argument', 'lexer', 'path', 'runtime')."""
        prefix = self.value.split("-")[1]
        return {
            "ARG": "argument",
            "LEX": "lexer",
            "PTH": "path",
            "RUN": "runtime",
        }.get(prefix, "unknown")


def _short_repr(value: Any, limit: int = 80) -> str:
    text = repr(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


class StacheError(Exception):
    """Base exception for all Stache errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-line summary prefixed by its error code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class InvalidArgumentError(StacheError, TypeError):
    """An argument violated the documented input contract.

    These are programmer errors: an options argument that is not an options
    object, a resolver that is not callable, tags that are not a pair of
    strings. The offending value is kept on the exception for diagnostics.

    Example:
        >>> Renderer(tokens, options=42)
        InvalidArgumentError: If options is passed, it should be an options
        object or a mapping. Got 42 (int)
    """

    code: ErrorCode | None = ErrorCode.INVALID_ARGUMENT

    def __init__(self, message: str, value: Any = None):
        self.message = message
        self.value = value
        super().__init__(f"{message} {_short_repr(value)} ({type(value).__name__})")


class TemplateSyntaxError(StacheError):
    """Template or placeholder expression could not be parsed.

    When ``source`` and ``lineno`` are provided, the message includes the
    offending line. If ``col_offset`` is also given, a caret (``^``) points
    at the exact column.
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source: str | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source = source
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"

        header = f"{self.message} at {location}"

        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                error_line = lines[self.lineno - 1]
                snippet = f"\n   |\n{self.lineno:>3} | {error_line}"
                if self.col_offset is not None:
                    snippet += f"\n   | {' ' * self.col_offset}^"
                return header + snippet

        return header


class TokenStreamError(StacheError, ValueError):
    """Literal segments and placeholders are not aligned.

    A token stream must carry exactly one more literal segment than it has
    placeholders; anything else would misalign the output buffer.
    """

    code: ErrorCode | None = ErrorCode.TOKEN_STREAM_MISMATCH

    def __init__(self, strings_count: int, var_names_count: int):
        self.strings_count = strings_count
        self.var_names_count = var_names_count
        super().__init__(
            f"Expected {var_names_count + 1} literal segments for "
            f"{var_names_count} placeholders, got {strings_count}"
        )


class UndefinedError(StacheError, KeyError):
    """Raised in strict mode when a placeholder path does not exist in the scope.

    If ``available_names`` is provided, a "Did you mean?" suggestion is
    included when a close match is found.

    Example:
        >>> render("{{ user.nmae }}", {"user": {"name": "Ada"}}, {"strict": True})
        UndefinedError: 'user.nmae' is not defined: no key 'nmae'. Did you mean 'name'?
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        path: tuple[str, ...],
        key: str,
        available_names: frozenset[str] | None = None,
    ):
        self.path = path
        self.key = key
        self._available_names = available_names
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        name = ".".join(self.path)
        msg = f"'{name}' is not defined: no key '{self.key}'"

        if self._available_names:
            from difflib import get_close_matches

            matches = get_close_matches(self.key, self._available_names, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"

        return msg

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""
