"""Pytest configuration and fixtures for Stache tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from stache import Renderer, RendererOptions, TokenStream


def make_tokens(*parts: str) -> TokenStream:
    """Build a TokenStream from alternating literal/placeholder parts.

    ``make_tokens("Hello ", "name", "!")`` has literals ``("Hello ", "!")``
    and one placeholder ``"name"``. An even number of parts gets an empty
    trailing literal.
    """
    if len(parts) % 2 == 0:
        parts = (*parts, "")
    return TokenStream(strings=tuple(parts[0::2]), var_names=tuple(parts[1::2]))


@pytest.fixture
def renderer_factory() -> Callable[..., Renderer]:
    """Build a Renderer from alternating literal/placeholder parts."""

    def factory(*parts: str, **options: object) -> Renderer:
        return Renderer(make_tokens(*parts), RendererOptions(**options))

    return factory


@pytest.fixture
def greeting(renderer_factory: Callable[..., Renderer]) -> Renderer:
    """Renderer for "Hello {{ name }}!"."""
    return renderer_factory("Hello ", "name", "!")
