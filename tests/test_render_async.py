"""Tests for render_async(): concurrent resolution, ordering and reentrancy."""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Callable

import pytest

from stache import InvalidArgumentError, Renderer, get_resolve_context


def delayed_resolver(delays: dict[str, float], finished: list[str] | None = None):
    """Resolver that returns the scope value after a per-placeholder delay."""

    async def resolve(var_name: str, scope: dict) -> object:
        await asyncio.sleep(delays.get(var_name, 0))
        if finished is not None:
            finished.append(var_name)
        return scope[var_name]

    return resolve


class TestRenderAsync:
    @pytest.mark.asyncio
    async def test_default_lookup(self, greeting: Renderer) -> None:
        assert await greeting.render_async({"name": "World"}) == "Hello World!"

    @pytest.mark.asyncio
    async def test_sync_resolver_values_are_used_directly(self, greeting: Renderer) -> None:
        assert await greeting.render_async({}, lambda name, scope: "sync") == "Hello sync!"

    @pytest.mark.asyncio
    async def test_mixed_awaitable_and_plain_values(
        self, renderer_factory: Callable[..., Renderer]
    ) -> None:
        async def later() -> str:
            return "async"

        def resolve(var_name: str, scope: object) -> object:
            return later() if var_name == "a" else "plain"

        renderer = renderer_factory("", "a", "/", "b")
        assert await renderer.render_async({}, resolve) == "async/plain"

    @pytest.mark.asyncio
    async def test_futures_are_awaited(self, greeting: Renderer) -> None:
        loop = asyncio.get_running_loop()

        def resolve(var_name: str, scope: object) -> asyncio.Future[str]:
            future: asyncio.Future[str] = loop.create_future()
            loop.call_soon(future.set_result, "future")
            return future

        assert await greeting.render_async({}, resolve) == "Hello future!"

    @pytest.mark.asyncio
    async def test_output_keeps_placeholder_order(
        self, renderer_factory: Callable[..., Renderer]
    ) -> None:
        finished: list[str] = []
        resolve = delayed_resolver({"first": 0.05, "second": 0.0}, finished)
        renderer = renderer_factory("", "first", " then ", "second")

        result = await renderer.render_async({"first": 1, "second": 2}, resolve)

        assert finished == ["second", "first"]
        assert result == "1 then 2"

    @pytest.mark.asyncio
    async def test_resolutions_run_concurrently(
        self, renderer_factory: Callable[..., Renderer]
    ) -> None:
        resolve = delayed_resolver({"a": 0.1, "b": 0.1, "c": 0.1})
        renderer = renderer_factory("", "a", "", "b", "", "c")

        start = time.perf_counter()
        result = await renderer.render_async({"a": "x", "b": "y", "c": "z"}, resolve)
        elapsed = time.perf_counter() - start

        assert result == "xyz"
        assert elapsed < 0.25

    @pytest.mark.asyncio
    async def test_failure_propagates(self, greeting: Renderer) -> None:
        async def fail(var_name: str, scope: object) -> str:
            raise LookupError(var_name)

        with pytest.raises(LookupError, match="name"):
            await greeting.render_async({}, fail)

    @pytest.mark.asyncio
    async def test_failure_cancels_siblings(
        self, renderer_factory: Callable[..., Renderer]
    ) -> None:
        cancelled = asyncio.Event()

        async def resolve(var_name: str, scope: object) -> str:
            if var_name == "bad":
                raise LookupError(var_name)
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return var_name

        renderer = renderer_factory("", "slow", "", "bad")
        with pytest.raises(LookupError, match="bad"):
            await renderer.render_async({}, resolve)
        await asyncio.wait_for(cancelled.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_resolver_error_closes_created_coroutines(
        self, renderer_factory: Callable[..., Renderer]
    ) -> None:
        created = []

        async def later() -> str:
            return "never"

        def resolve(var_name: str, scope: object) -> object:
            if var_name == "bad":
                raise LookupError(var_name)
            coro = later()
            created.append(coro)
            return coro

        renderer = renderer_factory("", "a", "", "b", "", "bad")
        with pytest.raises(LookupError):
            await renderer.render_async({}, resolve)
        assert len(created) == 2
        assert all(
            inspect.getcoroutinestate(coro) == inspect.CORO_CLOSED for coro in created
        )

    @pytest.mark.asyncio
    async def test_non_callable_resolver(self, greeting: Renderer) -> None:
        with pytest.raises(InvalidArgumentError):
            await greeting.render_async({}, 123)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_resolver_coroutines_see_context(self, greeting: Renderer) -> None:
        async def resolve(var_name: str, scope: object) -> str:
            await asyncio.sleep(0)
            return str(get_resolve_context())

        assert await greeting.render_async({}, resolve, "service") == "Hello service!"
        assert get_resolve_context() is None


class TestReentrancy:
    """Concurrent render_async() calls on one Renderer."""

    @staticmethod
    async def _overlapping(renderer: Renderer) -> tuple[str, str]:
        resolve = delayed_resolver({"slow": 0.05, "fast": 0.0})
        slow = asyncio.ensure_future(
            renderer.render_async({"slow": "S1", "fast": "F1"}, resolve)
        )
        await asyncio.sleep(0)
        fast = asyncio.ensure_future(
            renderer.render_async({"slow": "S2", "fast": "F2"}, resolve)
        )
        return await slow, await fast

    @pytest.mark.asyncio
    async def test_fresh_buffer_is_reentrant(
        self, renderer_factory: Callable[..., Renderer]
    ) -> None:
        renderer = renderer_factory("", "slow", "-", "fast")
        first, second = await self._overlapping(renderer)
        assert first == "S1-F1"
        assert second == "S2-F2"

    @pytest.mark.asyncio
    async def test_serialized_calls_with_reused_buffer(
        self, renderer_factory: Callable[..., Renderer]
    ) -> None:
        renderer = renderer_factory("", "slow", "-", "fast", reuse_buffer=True)
        resolve = delayed_resolver({"slow": 0.01})
        assert await renderer.render_async({"slow": "S1", "fast": "F1"}, resolve) == "S1-F1"
        assert await renderer.render_async({"slow": "S2", "fast": "F2"}, resolve) == "S2-F2"

    @pytest.mark.asyncio
    async def test_gather_many_renders_on_one_renderer(
        self, renderer_factory: Callable[..., Renderer]
    ) -> None:
        renderer = renderer_factory("#", "n")

        async def resolve(var_name: str, scope: dict) -> int:
            await asyncio.sleep(0.001 * (10 - scope["n"]))
            return scope["n"]

        results = await asyncio.gather(
            *(renderer.render_async({"n": n}, resolve) for n in range(10))
        )
        assert results == [f"#{n}" for n in range(10)]
