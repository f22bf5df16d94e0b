"""Template-string tags (PEP 750) for Stache.

``render_tag()`` and ``render_tag_async()`` bind a scope and options and
return a tag. The tag takes a t-string and renders it immediately,
treating each interpolated value as a placeholder expression:

    >>> tag = render_tag({"user": {"name": "Ada"}})
    >>> tag(t"Hello {'user.name'}!")
    'Hello Ada!'

Python has no t-strings before 3.14, so the tag also accepts the
tagged-template calling convention ``tag(strings, *values)``:

    >>> tag(["Hello ", "!"], "user.name")
    'Hello Ada!'

Each call builds its own Renderer. Nothing is cached between calls because
the interpolated values are fresh on every evaluation of the t-string.

"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from stache._types import TokenStream
from stache.options import RendererOptions, coerce_options
from stache.renderer import Renderer


@runtime_checkable
class TemplateProtocol(Protocol):
    strings: tuple[str, ...]
    interpolations: tuple[Any, ...]


def _tokens_from_call(
    strings: Sequence[str] | TemplateProtocol, values: tuple[Any, ...]
) -> TokenStream:
    """Build a TokenStream from a t-string or a ``(strings, *values)`` call."""
    if isinstance(strings, TemplateProtocol):
        # Any object structurally matching string.templatelib.Template
        literals = strings.strings
        values = tuple(interpolation.value for interpolation in strings.interpolations)
    else:
        literals = strings
    return TokenStream(strings=tuple(str(s) for s in literals), var_names=values)


def render_tag(
    scope: Any = None,
    options: RendererOptions | Mapping[str, Any] | None = None,
) -> Callable[..., str]:
    """Return a tag that renders t-strings against ``scope``.

    Args:
        scope: Same as the scope for ``render()``
        options: Renderer options, validated once here

    Raises:
        InvalidArgumentError: If options is not an options object or mapping
    """
    opts = coerce_options(options, RendererOptions)

    def tag(strings: Sequence[str] | TemplateProtocol, *values: Any) -> str:
        renderer = Renderer(_tokens_from_call(strings, values), opts)
        return renderer.render(scope)

    return tag


def render_tag_async(
    scope: Any = None,
    options: RendererOptions | Mapping[str, Any] | None = None,
) -> Callable[..., Awaitable[str]]:
    """Same as render_tag() but the tag is a coroutine function awaiting async resolvers."""
    opts = coerce_options(options, RendererOptions)

    async def tag(strings: Sequence[str] | TemplateProtocol, *values: Any) -> str:
        renderer = Renderer(_tokens_from_call(strings, values), opts)
        return await renderer.render_async(scope)

    return tag
