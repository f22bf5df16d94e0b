"""Template tokenizer for Stache.

Splits template source into literal segments and placeholder expressions::

    "Hello {{ name }}!"  ->  TokenStream(strings=("Hello ", "!"), var_names=("name",))

Placeholders are delimited by a configurable pair of tags (``{{`` and
``}}`` by default). Expression text is stripped of surrounding whitespace
but otherwise kept raw: parsing it into a path is the Renderer's job, and a
resolver override may interpret it in any way it likes.

Errors report the 1-based line and 0-based column of the opening tag.

"""

from __future__ import annotations

from stache._types import TokenStream
from stache.exceptions import ErrorCode, TemplateSyntaxError
from stache.options import DEFAULT_TAGS
from stache.utils.predicates import assert_type


def _position(source: str, offset: int) -> tuple[int, int]:
    """Convert a string offset to (lineno, col_offset)."""
    lineno = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return lineno, offset - line_start


def _syntax_error(message: str, source: str, offset: int, code: ErrorCode) -> TemplateSyntaxError:
    lineno, col = _position(source, offset)
    return TemplateSyntaxError(message, lineno=lineno, col_offset=col, source=source, code=code)


def _check_tags(tags: object) -> tuple[str, str]:
    valid = (
        isinstance(tags, (tuple, list))
        and len(tags) == 2
        and all(isinstance(tag, str) and tag for tag in tags)
        and tags[0] != tags[1]
    )
    assert_type(valid, "tags should be a pair of distinct non-empty strings. Got", tags)
    return tags[0], tags[1]  # type: ignore[index]


def tokenize(
    template: str,
    *,
    tags: tuple[str, str] = DEFAULT_TAGS,
    max_var_name_length: int = 1000,
) -> TokenStream:
    """Split ``template`` into literal segments and placeholder expressions.

    Args:
        template: Template source
        tags: Opening and closing delimiters
        max_var_name_length: Longest accepted expression (after stripping)

    Returns:
        TokenStream with ``len(strings) == len(var_names) + 1``

    Raises:
        InvalidArgumentError: If template is not a string or tags are invalid
        TemplateSyntaxError: For an unclosed or nested placeholder, or an
            expression longer than ``max_var_name_length``

    Example:
        >>> tokenize("{{a}} and {{ b.c }}")
        TokenStream(strings=('', ' and ', ''), var_names=('a', 'b.c'))
        >>> tokenize("<% x %>", tags=("<%", "%>")).var_names
        ('x',)
    """
    assert_type(isinstance(template, str), "The template parameter must be a string. Got", template)
    open_tag, close_tag = _check_tags(tags)
    open_len, close_len = len(open_tag), len(close_tag)

    strings: list[str] = []
    var_names: list[str] = []
    pos = 0

    while True:
        open_at = template.find(open_tag, pos)
        if open_at == -1:
            break

        expr_start = open_at + open_len
        close_at = template.find(close_tag, expr_start)
        if close_at == -1:
            raise _syntax_error(
                f"Missing '{close_tag}' after '{open_tag}'",
                template,
                open_at,
                ErrorCode.UNCLOSED_TAG,
            )

        nested_at = template.find(open_tag, expr_start, close_at)
        if nested_at != -1:
            raise _syntax_error(
                f"Found '{open_tag}' inside a placeholder opened earlier; "
                f"expected '{close_tag}' first",
                template,
                nested_at,
                ErrorCode.NESTED_TAG,
            )

        var_name = template[expr_start:close_at].strip()
        if len(var_name) > max_var_name_length:
            raise _syntax_error(
                f"Placeholder expression is {len(var_name)} characters long, "
                f"more than the maximum of {max_var_name_length}",
                template,
                open_at,
                ErrorCode.VAR_NAME_TOO_LONG,
            )

        strings.append(template[pos:open_at])
        var_names.append(var_name)
        pos = close_at + close_len

    strings.append(template[pos:])
    return TokenStream(strings=tuple(strings), var_names=tuple(var_names))
