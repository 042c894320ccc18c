"""Title-casing with lowercase/uppercase exception words."""

from __future__ import annotations

import re

from utilkit.core.contracts import TitleCaseOptions
from utilkit.core.locales import to_lower, to_upper
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for


@register_operation("convert_to_title_case", defaults=TitleCaseOptions())
def convert_to_title_case(value: str, options: OptionsInput = None) -> str:
    """Capitalise each word of *value*, keeping the original separators.

    Uppercase exceptions win over lowercase ones. The first word is always
    capitalised when ``force_first_uppercase`` is set.
    """
    opts: TitleCaseOptions = resolve_for("convert_to_title_case", options)
    upper_words = {word.casefold() for word in opts.uppercase_words}
    lower_words = {word.casefold() for word in opts.lowercase_words}

    tokens = _split_keeping_separators(value, opts.separators)
    seen_first = False
    rendered: list[str] = []

    # Words sit at even indexes, separators at odd ones.
    for index, token in enumerate(tokens):
        if index % 2 or not token:
            rendered.append(token)
            continue

        is_first = not seen_first
        seen_first = True
        key = token.casefold()

        if key in upper_words:
            rendered.append(to_upper(token, opts.locale))
        elif key in lower_words and not (is_first and opts.force_first_uppercase):
            rendered.append(to_lower(token, opts.locale))
        else:
            rendered.append(to_upper(token[0], opts.locale) + to_lower(token[1:], opts.locale))

    return "".join(rendered)


def _split_keeping_separators(value: str, separators: list[str]) -> list[str]:
    usable = sorted({sep for sep in separators if sep}, key=len, reverse=True)
    if not usable:
        return [value]
    pattern = "(" + "|".join(re.escape(sep) for sep in usable) + ")"
    return re.split(pattern, value)
