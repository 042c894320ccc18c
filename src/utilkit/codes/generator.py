"""Charset- and segment-driven random code synthesis."""

from __future__ import annotations

import random
import secrets
from collections.abc import Callable, Sequence

from utilkit.core.contracts import CodeOptions
from utilkit.core.exceptions import InvalidSpecError
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for

AMBIGUOUS_CHARACTERS = frozenset("0OIl")

# Not suitable for secrets; pass ``secure=True`` to draw from the OS CSPRNG.
_RANDOM = random.Random()


def effective_charset(charset: str, *, exclude_ambiguous: bool) -> str:
    """Deduplicate *charset* (order preserved) and optionally drop ambiguous glyphs."""
    chars = dict.fromkeys(charset)
    if exclude_ambiguous:
        chars = {c: None for c in chars if c not in AMBIGUOUS_CHARACTERS}
    return "".join(chars)


@register_operation("generate_unique_code", defaults=CodeOptions())
def generate_unique_code(options: OptionsInput = None) -> str:
    """Return ``prefix + body + suffix`` with a uniformly random body.

    Every character is an independent uniform draw from the effective
    charset, so a body of ``n`` characters over ``k`` symbols collides with
    probability ``1 / k**n`` per pair. Uniqueness across calls is not
    tracked here.
    """
    opts: CodeOptions = resolve_for("generate_unique_code", options)

    charset = effective_charset(opts.charset, exclude_ambiguous=opts.exclude_ambiguous)
    if not charset:
        raise InvalidSpecError("Effective charset is empty")

    choose = secrets.choice if opts.secure else _RANDOM.choice

    if opts.segments is not None:
        _check_lengths(opts.segments)
        body = opts.separator.join(_draw(charset, size, choose) for size in opts.segments)
    else:
        _check_lengths([opts.length])
        body = _draw(charset, opts.length, choose)

    return f"{opts.prefix}{body}{opts.suffix}"


def _check_lengths(lengths: Sequence[int]) -> None:
    if not lengths:
        raise InvalidSpecError("At least one segment length is required")
    for size in lengths:
        if size <= 0:
            raise InvalidSpecError(f"Code lengths must be positive, got {size}")


def _draw(charset: str, size: int, choose: Callable[[str], str]) -> str:
    return "".join(choose(charset) for _ in range(size))
