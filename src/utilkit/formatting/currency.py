"""Currency rendering with half-away-from-zero rounding and locale separators."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from utilkit.core.contracts import CurrencyOptions, SymbolPosition
from utilkit.core.exceptions import InvalidSpecError
from utilkit.core.locales import number_symbols
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for

GROUP_SIZE = 3

Amount = int | float | Decimal


@register_operation("format_currency", defaults=CurrencyOptions(), config_slice="currency")
def format_currency(amount: Amount, options: OptionsInput = None) -> str:
    """Render *amount* as money, e.g. ``1234.5`` -> ``"$1,234.50"``.

    Explicit separator options win over the locale's symbols.
    """
    opts: CurrencyOptions = resolve_for("format_currency", options)
    return render_currency(amount, opts)


@register_operation("format_usd", defaults=CurrencyOptions())
def format_usd(amount: Amount, options: OptionsInput = None) -> str:
    """US dollar preset; ignores the global ``currency`` section."""
    opts: CurrencyOptions = resolve_for("format_usd", options)
    return render_currency(amount, opts)


def render_currency(amount: Amount, opts: CurrencyOptions) -> str:
    if opts.decimals < 0:
        raise InvalidSpecError(f"Decimals must be >= 0, got {opts.decimals}")

    rounded = round_half_away(amount, opts.decimals)
    negative = rounded < 0

    digits = f"{rounded.copy_abs():f}"
    integer_part, _, fraction_part = digits.partition(".")

    locale_decimal, locale_group = number_symbols(opts.locale)
    decimal_separator = opts.decimal_separator if opts.decimal_separator is not None else locale_decimal
    thousands_separator = (
        opts.thousands_separator if opts.thousands_separator is not None else locale_group
    )

    number = group_digits(integer_part, thousands_separator)
    if opts.decimals:
        number += decimal_separator + fraction_part

    space = " " if opts.include_space else ""
    if opts.symbol_position is SymbolPosition.BEFORE:
        body = f"{opts.symbol}{space}{number}"
    else:
        body = f"{number}{space}{opts.symbol}"

    if not negative:
        return body
    return f"({body})" if opts.negative_in_parentheses else f"-{body}"


def round_half_away(amount: Amount, decimals: int) -> Decimal:
    """Round to *decimals* places, ties away from zero (``2.5 -> 3``, ``-2.5 -> -3``)."""
    try:
        value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    except InvalidOperation as exc:
        raise InvalidSpecError(f"Cannot format amount {amount!r}") from exc
    if not value.is_finite():
        raise InvalidSpecError(f"Cannot format non-finite amount {amount!r}")

    quantum = Decimal(1).scaleb(-decimals)
    # quantize needs every integer digit plus the requested places.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    # Normalise -0.00 so it renders without a sign.
    return rounded if rounded else rounded.copy_abs()


def group_digits(digits: str, separator: str) -> str:
    if not separator or len(digits) <= GROUP_SIZE:
        return digits
    head = len(digits) % GROUP_SIZE or GROUP_SIZE
    groups = [digits[:head]]
    groups.extend(digits[i : i + GROUP_SIZE] for i in range(head, len(digits), GROUP_SIZE))
    return separator.join(groups)
