"""Async rendering -- placeholders resolved by concurrent lookups.

An async resolver replaces scope lookup. Every placeholder starts its
lookup at once and render_async() awaits them together, so the total
latency is that of the slowest lookup, not the sum.

Run:
    python app.py
"""

import asyncio
import time

from stache import compile, get_resolve_context

# -- Simulated async data source -------------------------------------------

PROFILES = {
    "user.name": ("Ada Lovelace", 0.05),
    "user.role": ("Analyst", 0.03),
    "team.name": ("Engines", 0.04),
}


async def fetch(var_name: str, scope: dict) -> str:
    """Simulate a remote lookup with per-key latency."""
    value, delay = PROFILES[var_name]
    await asyncio.sleep(delay)
    prefix = get_resolve_context() or ""
    return f"{prefix}{value}"


# -- Template setup ---------------------------------------------------------

template = compile(
    "{{ user.name }} ({{ user.role }}) works on {{ team.name }}",
    {"resolve_fn": fetch},
)


async def render() -> tuple[str, float]:
    """Render once and return the output with the elapsed time."""
    start = time.perf_counter()
    text = await template.render_async()
    return text, time.perf_counter() - start


# Run at import time for test access
output, elapsed = asyncio.run(render())


def main() -> None:
    print(output)
    print(f"Rendered in {elapsed:.3f}s")


if __name__ == "__main__":
    main()
