"""Locale helpers backed by Babel's CLDR data.

Unknown or malformed locale tags degrade to built-in behaviour (``.``
decimal point, ``,`` grouping, plain Unicode casing) with a warning.
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache

import structlog
from babel import Locale, UnknownLocaleError
from babel.dates import format_datetime as babel_format_datetime
from babel.numbers import format_decimal, get_decimal_symbol, get_group_symbol

logger = structlog.get_logger()

FALLBACK_DECIMAL_SYMBOL = "."
FALLBACK_GROUP_SYMBOL = ","
FALLBACK_LOCALE = "en_US"

# Languages whose dotted/dotless i pair differs from the Unicode default mapping.
_TURKIC_LANGUAGES = frozenset({"tr", "az"})


@lru_cache(maxsize=128)
def parse_locale(tag: str | None) -> Locale | None:
    """Parse a BCP 47 (``en-US``) or POSIX (``en_US``) tag; ``None`` if unsupported."""
    if not tag:
        return None
    try:
        return Locale.parse(tag.replace("-", "_"))
    except (UnknownLocaleError, ValueError):
        logger.warning("locale.unknown", locale=tag)
        return None


def number_symbols(tag: str | None) -> tuple[str, str]:
    """Return ``(decimal_symbol, group_symbol)`` for *tag*."""
    locale = parse_locale(tag)
    if locale is None:
        return FALLBACK_DECIMAL_SYMBOL, FALLBACK_GROUP_SYMBOL
    return get_decimal_symbol(locale), get_group_symbol(locale)


def format_integer(value: int, tag: str | None) -> str:
    locale = parse_locale(tag)
    if locale is None:
        return str(value)
    return format_decimal(value, locale=locale)


def format_datetime_pattern(value: datetime, pattern: str, tag: str | None) -> str:
    """Render an already timezone-adjusted datetime with an LDML pattern."""
    locale = parse_locale(tag) or Locale.parse(FALLBACK_LOCALE)
    return babel_format_datetime(value, format=pattern, locale=locale)


def _language(tag: str | None) -> str:
    if not tag:
        return ""
    return tag.replace("_", "-").split("-", 1)[0].lower()


def to_upper(text: str, tag: str | None) -> str:
    if _language(tag) in _TURKIC_LANGUAGES:
        text = text.replace("i", "İ")
    return text.upper()


def to_lower(text: str, tag: str | None) -> str:
    if _language(tag) in _TURKIC_LANGUAGES:
        text = text.replace("I", "ı").replace("İ", "i")
    return text.lower()
