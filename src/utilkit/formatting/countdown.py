"""Countdown rendering over a whole-second duration."""

from __future__ import annotations

import time
from datetime import UTC, datetime

from utilkit.core.contracts import CountdownFormat, CountdownLabels, CountdownOptions
from utilkit.core.exceptions import InvalidSpecError
from utilkit.core.locales import format_integer
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for

UNIT_SECONDS: tuple[tuple[str, int], ...] = (
    ("days", 86_400),
    ("hours", 3_600),
    ("minutes", 60),
    ("seconds", 1),
)

SHORT_LABELS = {"days": "d", "hours": "h", "minutes": "m", "seconds": "s"}
LONG_LABELS = {"days": "day", "hours": "hour", "minutes": "minute", "seconds": "second"}

Instant = int | float | datetime


def to_epoch_seconds(value: Instant) -> float:
    """Epoch seconds for a number or datetime; naive datetimes are UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.timestamp()
    return float(value)


def decompose(total_seconds: int) -> list[tuple[str, int]]:
    """Split a duration into ``[(unit, value), ...]`` from days down to seconds."""
    parts: list[tuple[str, int]] = []
    remaining = total_seconds
    for unit, size in UNIT_SECONDS:
        value, remaining = divmod(remaining, size)
        parts.append((unit, value))
    return parts


@register_operation("get_remaining_time_for_countdown", defaults=CountdownOptions())
def get_remaining_time_for_countdown(
    target: Instant, now: Instant | None = None, options: OptionsInput = None
) -> str:
    """Render the time left until *target*, e.g. ``"1d 1h 1m 1s"``.

    Leading and trailing zero units are hidden unless ``show_zeros``; zero
    units between two non-zero ones are kept. At most ``max_units`` units are
    rendered, dropping the least significant first. An elapsed countdown
    renders ``labels.expired`` (empty by default), or ``0s`` with
    ``show_zeros``.
    """
    opts: CountdownOptions = resolve_for("get_remaining_time_for_countdown", options)
    if opts.max_units < 1:
        raise InvalidSpecError(f"max_units must be >= 1, got {opts.max_units}")

    current = time.time() if now is None else to_epoch_seconds(now)
    delta = max(0, int(to_epoch_seconds(target) - current))

    if delta == 0:
        if not opts.show_zeros:
            return opts.labels.expired
        return _render_unit("seconds", 0, opts)

    parts = decompose(delta)
    if not opts.show_zeros:
        first = next(i for i, (_, value) in enumerate(parts) if value)
        parts = parts[first:]

    parts = parts[: opts.max_units]

    if not opts.show_zeros:
        while parts[-1][1] == 0:
            parts.pop()

    return opts.separator.join(_render_unit(unit, value, opts) for unit, value in parts)


def _render_unit(unit: str, value: int, opts: CountdownOptions) -> str:
    number = format_integer(value, opts.locale)
    match opts.format:
        case CountdownFormat.SHORT:
            return f"{number}{SHORT_LABELS[unit]}"
        case CountdownFormat.LONG:
            label = LONG_LABELS[unit]
            return f"{number} {label}" if value == 1 else f"{number} {label}s"
        case CountdownFormat.CUSTOM:
            return f"{number} {_custom_label(opts.labels, unit, value)}"


def _custom_label(labels: CountdownLabels, unit: str, value: int) -> str:
    singular = getattr(labels, unit)
    if singular is None:
        raise InvalidSpecError(f"Custom countdown format requires a '{unit}' label")
    if value == 1:
        return singular
    return getattr(labels, f"{unit}_plural") or singular
