"""Concurrent rendering -- free-threading proof with 8 threads.

One compiled Renderer is shared by every thread. Each render assembles
into its own copy of the output buffer, so there is zero
cross-contamination between simultaneous renders.

Run:
    python app.py
"""

from concurrent.futures import ThreadPoolExecutor

from stache import compile

TEMPLATE_SOURCE = """\
<article id="page-{{ page_id }}">
  <h1>{{ title }}</h1>
  <p>Tags: {{ tags }}</p>
  <p>First: {{ tags[0] }}</p>
</article>"""

template = compile(TEMPLATE_SOURCE)

pages = [
    {"page_id": i, "title": f"Page {i}", "tags": [f"tag-{i}-a", f"tag-{i}-b", f"tag-{i}-c"]}
    for i in range(8)
]


def render_page(page: dict) -> str:
    """Render a single page -- called from a worker thread."""
    return template.render(page)


# Concurrent rendering -- no shared mutable state
with ThreadPoolExecutor(max_workers=8) as pool:
    results = list(pool.map(render_page, pages))

output = "\n".join(results)


def main() -> None:
    print(f"Rendered {len(results)} pages across 8 threads:\n")
    for i, html in enumerate(results):
        print(f"--- Thread {i} ---")
        print(html)
        print()


if __name__ == "__main__":
    main()
