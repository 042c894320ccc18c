"""Word-boundary-aware truncation with start, middle or end ellipsis."""

from __future__ import annotations

import math
import string

from utilkit.core.contracts import TruncateOptions, TruncatePosition
from utilkit.core.exceptions import InvalidSpecError
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for

BOUNDARY_CHARACTERS = frozenset("-_")
_EDGE_CHARACTERS = string.whitespace + "-_"


def is_boundary(char: str) -> bool:
    return char.isspace() or char in BOUNDARY_CHARACTERS


@register_operation("truncate_string", defaults=TruncateOptions())
def truncate_string(value: str, options: OptionsInput = None) -> str:
    """Shorten *value* to ``length`` visible characters plus the ellipsis.

    Strings that already fit are returned unchanged. The result never
    exceeds ``length + len(ellipsis)`` characters.
    """
    opts: TruncateOptions = resolve_for("truncate_string", options)
    if opts.length <= 0:
        raise InvalidSpecError(f"Truncation length must be positive, got {opts.length}")

    if len(value) <= opts.length:
        return value

    match opts.position:
        case TruncatePosition.END:
            return _head(value, opts.length, opts.word_boundary) + opts.ellipsis
        case TruncatePosition.START:
            return opts.ellipsis + _tail(value, opts.length, opts.word_boundary)
        case TruncatePosition.MIDDLE:
            front = _head(value, math.ceil(opts.length / 2), opts.word_boundary)
            back = _tail(value, opts.length // 2, opts.word_boundary)
            return front + opts.ellipsis + back


def _head(value: str, size: int, word_boundary: bool) -> str:
    """Leading part of *value* of at most *size* characters."""
    hard = value[:size]
    if not word_boundary or size >= len(value):
        return hard
    if is_boundary(value[size]) or is_boundary(value[size - 1]):
        return hard.rstrip(_EDGE_CHARACTERS) or hard

    cut = next((i for i in range(size - 1, 0, -1) if is_boundary(value[i])), 0)
    return value[:cut].rstrip(_EDGE_CHARACTERS) or hard


def _tail(value: str, size: int, word_boundary: bool) -> str:
    """Trailing part of *value* of at most *size* characters."""
    if size <= 0:
        return ""
    start = len(value) - size
    hard = value[start:]
    if not word_boundary or start <= 0:
        return hard
    if is_boundary(value[start]) or is_boundary(value[start - 1]):
        return hard.lstrip(_EDGE_CHARACTERS) or hard

    cut = next((i for i in range(start + 1, len(value)) if is_boundary(value[i])), None)
    if cut is None:
        return hard
    return value[cut + 1 :].lstrip(_EDGE_CHARACTERS) or hard
