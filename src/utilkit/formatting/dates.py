"""Locale-aware date/time rendering with LDML patterns."""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from utilkit.core.contracts import DateFormatOptions
from utilkit.core.exceptions import InvalidSpecError
from utilkit.core.locales import format_datetime_pattern
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for

DATE_PATTERN = "MM/dd/yyyy"
TIME_PATTERN = "hh:mm a"
DATE_TIME_PATTERN = f"{DATE_PATTERN} {TIME_PATTERN}"

DateInput = datetime | date | int | float


def _as_datetime(value: DateInput) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return datetime.fromtimestamp(value, tz=UTC)


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidSpecError(f"Unknown timezone {name!r}") from exc


def render(value: DateInput, opts: DateFormatOptions) -> str:
    """Render *value* with resolved options.

    With a ``timezone``, aware values are converted and naive ones are read
    as UTC first. Without one, the value is rendered in its own wall time.
    """
    moment = _as_datetime(value)
    if opts.timezone:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        moment = moment.astimezone(_zone(opts.timezone))
    return format_datetime_pattern(moment, opts.format, opts.locale)


@register_operation(
    "format_date", defaults=DateFormatOptions(format=DATE_PATTERN), config_slice="date_time"
)
def format_date(value: DateInput, options: OptionsInput = None) -> str:
    return render(value, resolve_for("format_date", options))


@register_operation(
    "format_time", defaults=DateFormatOptions(format=TIME_PATTERN), config_slice="date_time"
)
def format_time(value: DateInput, options: OptionsInput = None) -> str:
    return render(value, resolve_for("format_time", options))


@register_operation(
    "format_date_time",
    defaults=DateFormatOptions(format=DATE_TIME_PATTERN),
    config_slice="date_time",
)
def format_date_time(value: DateInput, options: OptionsInput = None) -> str:
    return render(value, resolve_for("format_date_time", options))
