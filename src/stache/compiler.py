"""Compile template source into a Renderer, and one-shot render helpers.

Pipeline:
    Template Source → tokenize() → TokenStream → Renderer → render()

``render()`` and ``render_async()`` compile on every call. When the same
template is rendered repeatedly, ``compile()`` it once and keep the
Renderer.

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from stache.lexer import tokenize
from stache.options import CompileOptions, coerce_options
from stache.renderer import Renderer


def compile(template: str, options: CompileOptions | Mapping[str, Any] | None = None) -> Renderer:
    """Tokenize ``template`` and build a Renderer for it.

    Args:
        template: Template source with ``{{ placeholder }}`` expressions
        options: CompileOptions (or a mapping); tokenizer settings are
            consumed here, the rest is passed on to the Renderer

    Example:
        >>> renderer = compile("Hi {{ user.name }}")
        >>> renderer.render({"user": {"name": "Ada"}})
        'Hi Ada'
    """
    opts = coerce_options(options, CompileOptions)
    tokens = tokenize(template, tags=opts.tags, max_var_name_length=opts.max_var_name_length)
    return Renderer(tokens, opts)


def render(
    template: str,
    scope: Any = None,
    options: CompileOptions | Mapping[str, Any] | None = None,
) -> str:
    """Replace every ``{{ placeholder }}`` in ``template`` with its value from ``scope``.

    Missing values render as an empty string, objects as compact JSON, and
    objects that cannot be serialized (circular references) as ``"{...}"``.

    Example:
        >>> render("Hello {{ name }}!", {"name": "World"})
        'Hello World!'
    """
    return compile(template, options).render(scope)


async def render_async(
    template: str,
    scope: Any = None,
    options: CompileOptions | Mapping[str, Any] | None = None,
) -> str:
    """Same as render() but awaits values returned by an async resolver."""
    return await compile(template, options).render_async(scope)
