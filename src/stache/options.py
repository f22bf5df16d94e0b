"""Configuration objects for Stache.

Options are immutable dataclasses layered the same way the features are:

    StringifyOptions        # fallback strings for unconvertible values
    └── RendererOptions     # resolver override, buffer policy, path handling
        └── CompileOptions  # tokenizer delimiters and limits

Every public entry point also accepts a plain mapping of field names, which
is validated and converted by ``coerce_options()``.

Example:
    >>> from stache import RendererOptions, Renderer
    >>> opts = RendererOptions(invalid_obj="<object>", reuse_buffer=True)
    >>> renderer = Renderer(tokens, opts)

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any, TypeVar

from stache.utils.predicates import assert_type, is_options_object, is_resolver

ResolveFn = Callable[[Any, Any], Any]
"""Resolver override: ``resolve_fn(var_name, scope) -> value | awaitable``.

``var_name`` is the raw placeholder expression (``"a.b.c"``, not the parsed
path), so a resolver is free to implement its own expression language.
"""

DEFAULT_TAGS: tuple[str, str] = ("{{", "}}")


@dataclass(frozen=True, slots=True)
class StringifyOptions:
    """Fallback strings used when a value cannot be converted to text.

    Attributes:
        invalid_type: Output for unsupported kinds (functions, classes, awaitables)
        invalid_obj: Output for objects that fail JSON serialization
    """

    invalid_type: str = ""
    invalid_obj: str = "{...}"


@dataclass(frozen=True, slots=True)
class RendererOptions(StringifyOptions):
    """Options bound to a Renderer for its whole lifetime.

    Attributes:
        resolve_fn: Resolver override replacing scope lookup for every placeholder
        resolve_fn_context: Invocation context published to the resolver
        reuse_buffer: Assemble every render into one shared buffer. Faster,
            but the Renderer is then not reentrant (see Renderer docs).
        strict: Raise UndefinedError for missing keys instead of rendering ""
        validate_var_names: Fail at construction on unparseable placeholders
        max_path_depth: Maximum number of steps in one placeholder path
    """

    resolve_fn: ResolveFn | None = None
    resolve_fn_context: Any = None
    reuse_buffer: bool = False
    strict: bool = False
    validate_var_names: bool = False
    max_path_depth: int = 10

    def __post_init__(self) -> None:
        if self.resolve_fn is not None:
            assert_type(
                is_resolver(self.resolve_fn),
                "Expected a resolver function but got",
                self.resolve_fn,
            )
        assert_type(
            isinstance(self.max_path_depth, int) and self.max_path_depth > 0,
            "max_path_depth should be a positive integer. Got",
            self.max_path_depth,
        )


@dataclass(frozen=True, slots=True)
class CompileOptions(RendererOptions):
    """Options for compiling a template string.

    Attributes:
        tags: Opening and closing placeholder delimiters
        max_var_name_length: Longest accepted placeholder expression
    """

    tags: tuple[str, str] = DEFAULT_TAGS
    max_var_name_length: int = 1000

    def __post_init__(self) -> None:
        RendererOptions.__post_init__(self)
        assert_type(
            isinstance(self.max_var_name_length, int) and self.max_var_name_length > 0,
            "max_var_name_length should be a positive integer. Got",
            self.max_var_name_length,
        )


_O = TypeVar("_O", bound=StringifyOptions)


def coerce_options(options: Any, cls: type[_O]) -> _O:
    """Validate an options argument and convert it to ``cls``.

    Accepts None (defaults), an instance of ``cls``, an instance of another
    options class (fields shared with ``cls`` are copied), or a mapping of
    field names.

    Raises:
        InvalidArgumentError: If options is of any other type, or a mapping
            holds names that ``cls`` does not define.
    """
    assert_type(
        is_options_object(options),
        "If options is passed, it should be an options object or a mapping. Got",
        options,
    )
    if options is None:
        return cls()
    if isinstance(options, cls):
        return options

    names = {f.name for f in fields(cls)}
    if isinstance(options, Mapping):
        unknown = sorted(str(key) for key in options if key not in names)
        assert_type(not unknown, "Unknown option names:", unknown)
        return cls(**options)

    shared = {f.name: getattr(options, f.name) for f in fields(options) if f.name in names}
    return cls(**shared)
