"""Stache: logic-less string templates for free-threaded Python.

Replaces ``{{ placeholders }}`` in a string with values looked up in a
scope, synchronously or with concurrently awaited async resolvers.

Quickstart:
    >>> from stache import render
    >>> render("Hello, {{ name }}!", {"name": "World"})
    'Hello, World!'

Compile once, render many:
    >>> from stache import compile
    >>> greet = compile("Hello, {{ user.name }}!")
    >>> greet.render({"user": {"name": "Ada"}})
    'Hello, Ada!'

Async resolvers:
    >>> async def fetch(var_name, scope):
    ...     return await db.lookup(var_name)
    >>> await greet.render_async(resolve_fn=fetch)

Architecture:
Template Source → tokenize() → TokenStream → Renderer → str

1. **Lexer**: Splits source into literal segments and raw placeholder expressions
2. **Renderer**: Parses each expression into a path once, then per render
   resolves values (scope lookup or resolver override) and assembles output
3. **Stringifier**: Converts every resolved value to text without ever raising

Value Conversion:
- Strings as-is, booleans as ``true``/``false``, infinities as ``∞``/``-∞``
- ``None`` and missing values as ``""``
- Objects with their own ``__str__`` via ``str()``, others as compact JSON
- Circular objects as ``"{...}"``, functions and awaitables as ``""``

Thread-Safety:
Renderers are safe for concurrent use, including concurrent
``render_async()`` calls, unless built with ``reuse_buffer=True``.

"""

from stache._types import TokenStream
from stache.compiler import compile, render, render_async
from stache.exceptions import (
    ErrorCode,
    InvalidArgumentError,
    StacheError,
    TemplateSyntaxError,
    TokenStreamError,
    UndefinedError,
)
from stache.lexer import tokenize
from stache.options import CompileOptions, RendererOptions, StringifyOptions
from stache.path import UNDEFINED, get, get_keys, to_path
from stache.renderer import Renderer
from stache.resolve_context import get_resolve_context
from stache.stringify import ValueKind, classify, stringify
from stache.tstring import render_tag, render_tag_async

__version__ = "0.1.0"

__all__ = [
    "UNDEFINED",
    "CompileOptions",
    "ErrorCode",
    "InvalidArgumentError",
    "Renderer",
    "RendererOptions",
    "StacheError",
    "StringifyOptions",
    "TemplateSyntaxError",
    "TokenStream",
    "TokenStreamError",
    "UndefinedError",
    "ValueKind",
    "__version__",
    "classify",
    "compile",
    "get",
    "get_keys",
    "get_resolve_context",
    "render",
    "render_async",
    "render_tag",
    "render_tag_async",
    "stringify",
    "to_path",
    "tokenize",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # Signal: this module is safe for free-threading
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'stache' has no attribute {name!r}")
