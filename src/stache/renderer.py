"""Stache Renderer: a tokenized template bound to its lookup caches.

The Renderer wraps one TokenStream and renders it against any number of
scopes, synchronously or concurrently.

Architecture:
    ```
    Renderer
    ├── _tokens: TokenStream        # literals + raw placeholder expressions
    ├── _paths: tuple[Path | None]  # one parsed path per placeholder
    ├── _buffer: list[str]          # literals at even slots, values at odd
    └── _options: RendererOptions
    ```

Output Buffer:
The buffer has ``2n + 1`` slots for ``n`` placeholders. Literal segments are
written to the even slots once, at construction; each render writes the
stringified values into the odd slots and joins::

    ["Hello ", <name>, "!"]  ->  "".join(...)  ->  "Hello World!"

Reentrancy:
By default every render assembles into a copy of the buffer, so one
Renderer can be shared by any number of threads and tasks. With
``reuse_buffer=True`` the odd slots are overwritten in place: that avoids
one list copy per render, but two renders running at the same time on
different threads write into the same slots and can return each other's
values. Assembly itself never suspends, so tasks sharing one event loop
cannot interleave there. Callers opting in must serialize calls per
instance across threads.

"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from stache._types import TokenStream
from stache.exceptions import InvalidArgumentError, TemplateSyntaxError, TokenStreamError
from stache.options import RendererOptions, ResolveFn, coerce_options
from stache.path import Path, get_keys, to_path
from stache.resolve_context import Resolution, effective_resolution, resolve_context
from stache.stringify import stringify
from stache.utils.predicates import assert_type

logger = logging.getLogger(__name__)


def _close_coroutines(values: Sequence[Any]) -> None:
    """Close resolver coroutines that will never be awaited."""
    for value in values:
        if inspect.iscoroutine(value):
            value.close()


class Renderer:
    """Tokenized template ready for repeated rendering.

    Placeholder paths are parsed once, at construction. Each ``render()``
    walks those cached paths against the scope it is given (or hands the
    raw expressions to a resolver override) and stringifies the results.

    Attributes:
        strings: Literal segments
        var_names: Raw placeholder expressions
        options: The RendererOptions this instance was built with

    Example:
        >>> from stache import Renderer, TokenStream
        >>> r = Renderer(TokenStream(("Hello ", "!"), ("name",)))
        >>> r.render({"name": "World"})
        'Hello World!'
        >>> r.render({"name": "Stache"})
        'Hello Stache!'

    Raises:
        InvalidArgumentError: If options is not an options object or mapping
        TokenStreamError: If ``len(strings) != len(var_names) + 1``
        TemplateSyntaxError: With ``validate_var_names=True``, if a
            placeholder cannot be parsed into a path
    """

    __slots__ = ("_buffer", "_options", "_paths", "_tokens")

    def __init__(
        self,
        tokens: TokenStream,
        options: RendererOptions | Mapping[str, Any] | None = None,
    ):
        self._options = coerce_options(options, RendererOptions)
        assert_type(
            isinstance(tokens, TokenStream),
            "Expected a TokenStream but got",
            tokens,
        )
        strings, var_names = tokens.strings, tokens.var_names
        if len(strings) != len(var_names) + 1:
            raise TokenStreamError(len(strings), len(var_names))
        self._tokens = tokens

        self._buffer: list[str] = [""] * (len(var_names) * 2 + 1)
        for i, literal in enumerate(strings):
            self._buffer[i * 2] = literal

        paths: list[Path | None] = []
        max_depth = self._options.max_path_depth
        for var_name in var_names:
            try:
                paths.append(to_path(var_name, max_depth=max_depth))
            except (TemplateSyntaxError, InvalidArgumentError):
                # Expressions may target a resolver override with its own syntax
                if self._options.validate_var_names:
                    raise
                paths.append(None)
        self._paths: tuple[Path | None, ...] = tuple(paths)

        logger.debug(
            f"Renderer built: {len(var_names)} placeholders, "
            f"reuse_buffer={self._options.reuse_buffer}"
        )

    @property
    def strings(self) -> tuple[str, ...]:
        return self._tokens.strings

    @property
    def var_names(self) -> tuple[Any, ...]:
        return self._tokens.var_names

    @property
    def options(self) -> RendererOptions:
        return self._options

    @property
    def reuse_buffer(self) -> bool:
        return self._options.reuse_buffer

    def _lookup(self, index: int, scope: Any) -> Any:
        path = self._paths[index]
        if path is None:
            # Re-parse to raise the deferred parse error
            path = to_path(self._tokens.var_names[index], max_depth=self._options.max_path_depth)
        return get_keys(scope, path, strict=self._options.strict)

    def _call_resolver(self, resolution: Resolution) -> list[Any]:
        """Resolve every placeholder, in index order.

        With a resolver override the raw expression is passed and the
        return value (possibly an awaitable) is used verbatim; cached paths
        are not consulted.
        """
        scope = resolution.scope
        resolve_fn = resolution.resolve_fn
        if resolve_fn is None:
            return [self._lookup(i, scope) for i in range(len(self._paths))]
        values: list[Any] = []
        try:
            for var_name in self._tokens.var_names:
                values.append(resolve_fn(var_name, scope))
        except BaseException:
            _close_coroutines(values)
            raise
        return values

    def _assemble(self, values: Sequence[Any]) -> str:
        buffer = self._buffer if self._options.reuse_buffer else self._buffer.copy()
        options = self._options
        for i, value in enumerate(values):
            buffer[i * 2 + 1] = stringify(value, options)
        return "".join(buffer)

    def render(
        self,
        scope: Any = None,
        resolve_fn: ResolveFn | None = None,
        resolve_fn_context: Any = None,
    ) -> str:
        """Render the template synchronously.

        Args:
            scope: Data to resolve placeholders against (default ``{}``)
            resolve_fn: Resolver override for this call only
            resolve_fn_context: Context published to the resolver

        Returns:
            The rendered string

        Raises:
            InvalidArgumentError: If the effective resolver is not callable
            UndefinedError: In strict mode, if a path is missing from scope
        """
        resolution = effective_resolution(scope, resolve_fn, resolve_fn_context, self._options)
        with resolve_context(resolution.context):
            values = self._call_resolver(resolution)

        for i, value in enumerate(values):
            if inspect.isawaitable(value):
                logger.warning(
                    f"Resolver returned an awaitable for {self._tokens.var_names[i]!r} "
                    f"in render(); use render_async() to await it"
                )
        _close_coroutines(values)
        return self._assemble(values)

    async def render_async(
        self,
        scope: Any = None,
        resolve_fn: ResolveFn | None = None,
        resolve_fn_context: Any = None,
    ) -> str:
        """Render the template, awaiting pending values concurrently.

        All placeholders are resolved first; the awaitables among the
        results are then joined with ``asyncio.gather()``, so they run
        concurrently. Output order is always placeholder order, whatever
        order the awaitables complete in.

        Args:
            scope: Data to resolve placeholders against (default ``{}``)
            resolve_fn: Resolver override for this call only; may be an
                ``async def`` function or return any awaitable
            resolve_fn_context: Context published to the resolver

        Returns:
            The rendered string

        Raises:
            Whatever the first failing awaitable raises.
        """
        resolution = effective_resolution(scope, resolve_fn, resolve_fn_context, self._options)
        with resolve_context(resolution.context):
            values = self._call_resolver(resolution)
            pending = [i for i, value in enumerate(values) if inspect.isawaitable(value)]
            if pending:
                tasks = [asyncio.ensure_future(values[i]) for i in pending]
                try:
                    results = await asyncio.gather(*tasks)
                except BaseException:
                    # Cancel the siblings of a failed awaitable
                    for task in tasks:
                        task.cancel()
                    raise
                for i, result in zip(pending, results, strict=True):
                    values[i] = result
        return self._assemble(values)

    def __repr__(self) -> str:
        return f"<Renderer placeholders={len(self._tokens.var_names)}>"
