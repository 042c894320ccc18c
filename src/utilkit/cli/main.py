"""CLI entry point for utilkit."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from utilkit.core.config import UtilkitSettings
from utilkit.core.exceptions import UtilkitError
from utilkit.core.logging import setup_logging
from utilkit.core.registry import list_operations

if sys.platform == "win32":
    os.environ.setdefault("PYTHONUTF8", "1")

app = typer.Typer(name="utilkit", help="utilkit - text, code, formatting and validation helpers")
console = Console()


def _given(**options: Any) -> dict[str, Any]:
    """Drop options the user did not pass so lower tiers still apply."""
    return {key: value for key, value in options.items() if value is not None}


def _run(operation: Callable[[], Any]) -> Any:
    try:
        return operation()
    except UtilkitError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from None


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    json_logs: bool = typer.Option(False, "--json-logs"),
) -> None:
    settings = UtilkitSettings()
    level = "DEBUG" if verbose else settings.log_level
    setup_logging(json_output=json_logs or settings.log_json, level=level)


@app.command()
def ops() -> None:
    """List registered operations and the global config section each reads."""
    _ensure_operations_loaded()

    table = Table(title="Registered Operations")
    table.add_column("Operation", style="cyan")
    table.add_column("Config section", style="green")

    for name, config_slice in list_operations().items():
        table.add_row(name, config_slice or "(none)")

    console.print(table)


@app.command()
def truncate(
    text: str = typer.Argument(help="Text to truncate"),
    length: int | None = typer.Option(None, "--length", "-l"),
    ellipsis: str | None = typer.Option(None, "--ellipsis"),
    position: str | None = typer.Option(None, "--position", help="start, middle or end"),
    word_boundary: bool | None = typer.Option(None, "--word-boundary/--no-word-boundary"),
) -> None:
    """Truncate text to a visible length."""
    from utilkit.text.truncate import truncate_string

    options = _given(
        length=length, ellipsis=ellipsis, position=position, word_boundary=word_boundary
    )
    console.print(_run(lambda: truncate_string(text, options)), markup=False)


@app.command()
def title(
    text: str = typer.Argument(help="Text to title-case"),
    upper: list[str] | None = typer.Option(None, "--upper", "-u", help="Acronym kept uppercase"),
    locale: str | None = typer.Option(None, "--locale"),
) -> None:
    """Convert text to title case."""
    from utilkit.text.titlecase import convert_to_title_case

    options = _given(uppercase_words=upper or None, locale=locale)
    console.print(_run(lambda: convert_to_title_case(text, options)), markup=False)


@app.command()
def code(
    length: int | None = typer.Option(None, "--length", "-l"),
    charset: str | None = typer.Option(None, "--charset"),
    segments: str | None = typer.Option(None, "--segments", help="Comma-separated, e.g. 3,3"),
    separator: str | None = typer.Option(None, "--separator"),
    prefix: str | None = typer.Option(None, "--prefix"),
    suffix: str | None = typer.Option(None, "--suffix"),
    exclude_ambiguous: bool | None = typer.Option(None, "--exclude-ambiguous/--keep-ambiguous"),
    secure: bool | None = typer.Option(None, "--secure/--no-secure"),
    count: int = typer.Option(1, "--count", "-n", min=1),
) -> None:
    """Generate one or more random codes."""
    from utilkit.codes.generator import generate_unique_code

    segment_sizes = None
    if segments:
        try:
            segment_sizes = [int(part) for part in segments.split(",")]
        except ValueError:
            console.print(f"[red]Invalid segments '{segments}'. Use e.g. 3,3[/]")
            raise typer.Exit(code=1) from None

    options = _given(
        length=length,
        charset=charset,
        segments=segment_sizes,
        separator=separator,
        prefix=prefix,
        suffix=suffix,
        exclude_ambiguous=exclude_ambiguous,
        secure=secure,
    )
    for _ in range(count):
        console.print(_run(lambda: generate_unique_code(options)), markup=False)


@app.command()
def currency(
    amount: float = typer.Argument(help="Amount (use -- before negative values)"),
    symbol: str | None = typer.Option(None, "--symbol"),
    decimals: int | None = typer.Option(None, "--decimals"),
    after: bool | None = typer.Option(None, "--after/--before", help="Symbol position"),
    space: bool | None = typer.Option(None, "--space/--no-space"),
    parentheses: bool | None = typer.Option(None, "--parentheses/--minus"),
    locale: str | None = typer.Option(None, "--locale"),
) -> None:
    """Format an amount as currency."""
    from utilkit.formatting.currency import format_currency

    options = _given(
        symbol=symbol,
        decimals=decimals,
        symbol_position=None if after is None else ("after" if after else "before"),
        include_space=space,
        negative_in_parentheses=parentheses,
        locale=locale,
    )
    console.print(_run(lambda: format_currency(amount, options)), markup=False)


@app.command()
def countdown(
    seconds: int = typer.Argument(help="Seconds remaining"),
    format: str | None = typer.Option(None, "--format", "-f", help="short or long"),
    max_units: int | None = typer.Option(None, "--max-units"),
    show_zeros: bool | None = typer.Option(None, "--show-zeros/--hide-zeros"),
) -> None:
    """Render a countdown for a number of remaining seconds."""
    from utilkit.formatting.countdown import get_remaining_time_for_countdown

    options = _given(format=format, max_units=max_units, show_zeros=show_zeros)
    console.print(
        _run(lambda: get_remaining_time_for_countdown(seconds, 0, options)), markup=False
    )


@app.command("stripe-error")
def stripe_error(
    code: str = typer.Argument(help="Stripe code to explain"),
    kind: str = typer.Option("error", "--kind", help="error, requirement or disabled"),
) -> None:
    """Explain a Stripe error, requirement or disabled-reason code."""
    from utilkit.lookups import stripe_errors

    lookups = {
        "error": stripe_errors.get_stripe_error_message_by_error_code,
        "requirement": stripe_errors.get_stripe_error_message_by_requirement,
        "disabled": stripe_errors.get_stripe_error_message_by_disabled_code,
    }
    if kind not in lookups:
        console.print(f"[red]Invalid kind '{kind}'. Choose from: {', '.join(lookups)}[/]")
        raise typer.Exit(code=1)
    console.print(lookups[kind](code), markup=False)


def _ensure_operations_loaded() -> None:
    """Import operation modules so their @register_operation decorators fire."""
    import utilkit.codes.generator
    import utilkit.formatting.countdown
    import utilkit.formatting.currency
    import utilkit.formatting.dates
    import utilkit.text.regex
    import utilkit.text.titlecase
    import utilkit.text.truncate
    import utilkit.validation.fields
    import utilkit.validation.files
    import utilkit.validation.images  # noqa: F401
