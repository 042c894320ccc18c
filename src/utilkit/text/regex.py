"""Compiled matcher construction from a pattern and JavaScript-style flags."""

from __future__ import annotations

import re
from dataclasses import dataclass

from utilkit.core.contracts import RegexMatchOptions
from utilkit.core.exceptions import InvalidSpecError
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for

GLOBAL_FLAG = "g"

FLAG_MAP: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": re.UNICODE,
    "x": re.VERBOSE,
    "a": re.ASCII,
}


@dataclass(frozen=True)
class RegexMatch:
    """A compiled pattern plus whether callers asked for every match."""

    regex: re.Pattern[str]
    flags: str
    is_global: bool

    def matches(self, text: str) -> list[str]:
        """All matched substrings when global, otherwise at most the first."""
        if self.is_global:
            return [m.group(0) for m in self.regex.finditer(text)]
        found = self.regex.search(text)
        return [found.group(0)] if found else []


@register_operation("create_regex_match", defaults=RegexMatchOptions())
def create_regex_match(pattern: str, options: OptionsInput = None) -> RegexMatch:
    """Compile *pattern*; the ``g`` flag is added when ``global`` is set."""
    opts: RegexMatchOptions = resolve_for("create_regex_match", options)

    flags = "".join(dict.fromkeys(opts.flags))
    if opts.global_ and GLOBAL_FLAG not in flags:
        flags += GLOBAL_FLAG

    unknown = sorted(set(flags) - set(FLAG_MAP) - {GLOBAL_FLAG})
    if unknown:
        raise InvalidSpecError(f"Unsupported regex flags: {''.join(unknown)}")

    compiled_flags = re.NOFLAG
    for flag in flags:
        compiled_flags |= FLAG_MAP.get(flag, re.NOFLAG)

    source = re.escape(pattern) if opts.escape else pattern
    try:
        regex = re.compile(source, compiled_flags)
    except (re.error, ValueError) as exc:
        raise InvalidSpecError(f"Cannot compile pattern {pattern!r}: {exc}") from exc

    return RegexMatch(regex=regex, flags=flags, is_global=GLOBAL_FLAG in flags)
