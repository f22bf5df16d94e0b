"""Shared data types for Stache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class TokenStream:
    """Tokenized template: literal segments interleaved with placeholders.

    ``strings[i]`` is the text before placeholder ``i`` and ``strings[-1]``
    the text after the last one, so ``len(strings) == len(var_names) + 1``.
    Placeholders are raw expression text (``"a.b.c"``) for compiled
    templates and arbitrary values for template-string tags.
    """

    strings: tuple[str, ...]
    var_names: tuple[Any, ...]
