"""Template tags -- render literal segments and placeholders directly.

render_tag() binds a scope and returns a tag. The tag takes literal
segments and placeholder expressions as separate arguments, the way a
tagged template (or a PEP 750 t-string) delivers them, so there is no
tokenizing step. Use it for high-frequency simple interpolation.

Run:
    python app.py
"""

import asyncio

from stache import render, render_tag, render_tag_async

scope = {"user": {"name": "Ada", "langs": ["en", "fr"]}}

html = render_tag(scope)

# Literal segments first, then one expression per gap
output = html(["<p>Hello ", " (", ")</p>"], "user.name", "user.langs[1]")

# Compare to tokenizing the same template
template_equivalent = render("<p>Hello {{ user.name }} ({{ user.langs[1] }})</p>", scope)


async def lookup(var_name: str, scope: dict) -> str:
    """Async resolver: pretend every expression is a remote key."""
    await asyncio.sleep(0)
    return var_name.upper()


shout = render_tag_async(options={"resolve_fn": lookup})
output_async = asyncio.run(shout(["[", "|", "]"], "a", "b"))


def main() -> None:
    print("=== html([...], ...) ===")
    print(output)
    print()
    print("=== Equivalent to render() ===")
    print(template_equivalent)
    print(f"Same output: {output == template_equivalent}")
    print()
    print("=== Async tag ===")
    print(output_async)


if __name__ == "__main__":
    main()
