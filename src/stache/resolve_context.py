"""Resolver invocation context, published through a ContextVar.

A resolver override is called as ``resolve_fn(var_name, scope)``. The object
it was bound to (the ``resolve_fn_context`` option, or the scope itself when
none is configured) is made available for the duration of the render:

    >>> from stache import Renderer, get_resolve_context
    >>> def resolve(var_name, scope):
    ...     return get_resolve_context()[var_name]
    >>> renderer.render({"x": 1}, resolve)

Benefits:
    - The resolver signature stays ``(var_name, scope)``
    - Thread-safe via ContextVar
    - Async-safe: tasks created while the context is set inherit it, so
      resolver coroutines joined by ``render_async()`` see the same value

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Any

from stache.options import RendererOptions, ResolveFn
from stache.utils.predicates import assert_type, is_resolver

_NOT_SET: Any = object()

_resolve_context: ContextVar[Any] = ContextVar("resolve_context", default=_NOT_SET)


@dataclass(frozen=True, slots=True)
class Resolution:
    """The effective inputs of one render call.

    Attributes:
        scope: Scope to resolve against (``{}`` when none was given)
        resolve_fn: Resolver override, or None for scope lookup
        context: Object published to the resolver via get_resolve_context()
    """

    scope: Any
    resolve_fn: ResolveFn | None
    context: Any


def effective_resolution(
    scope: Any,
    resolve_fn: ResolveFn | None,
    resolve_fn_context: Any,
    options: RendererOptions,
) -> Resolution:
    """Apply the override precedence for one render call.

    Precedence, for both the resolver and its context:
        1. The explicit argument of this call
        2. The Renderer's configured option
        3. Context only: the scope itself

    Raises:
        InvalidArgumentError: If the effective resolver is not callable
    """
    if scope is None:
        scope = {}
    if resolve_fn is None:
        resolve_fn = options.resolve_fn
    if resolve_fn is not None:
        assert_type(is_resolver(resolve_fn), "Expected a resolver function but got", resolve_fn)

    context = resolve_fn_context
    if context is None:
        context = options.resolve_fn_context
    if context is None:
        context = scope
    return Resolution(scope=scope, resolve_fn=resolve_fn, context=context)


def get_resolve_context(default: Any = None) -> Any:
    """Get the invocation context of the resolver currently running.

    Returns:
        The context object, or ``default`` outside of a resolver call
    """
    ctx = _resolve_context.get()
    return default if ctx is _NOT_SET else ctx


def set_resolve_context(ctx: Any) -> Token[Any]:
    """Set the resolver context and return the reset token.

    Low-level function for cases where the context manager isn't suitable.
    """
    return _resolve_context.set(ctx)


def reset_resolve_context(token: Token[Any]) -> None:
    """Reset resolver context using a token from set_resolve_context."""
    _resolve_context.reset(token)


@contextmanager
def resolve_context(ctx: Any) -> Iterator[Any]:
    """Context manager publishing ``ctx`` to resolvers.

    Automatically restores the previous context when exiting.

    Example:
        with resolve_context(service) as ctx:
            values = [resolve_fn(name, scope) for name in var_names]
    """
    token = _resolve_context.set(ctx)
    try:
        yield ctx
    finally:
        _resolve_context.reset(token)
