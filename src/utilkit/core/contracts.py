"""Pydantic v2 contracts: options records, global configuration, results."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from re import Pattern
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_CHARSET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
DEFAULT_ALLOWED_TYPES = ("image/png", "image/jpeg", "image/gif")
DEFAULT_LOCALE = "en-US"

DEFAULT_LOWERCASE_WORDS = (
    "a", "an", "the", "and", "or", "but", "for", "nor", "so", "yet",
    "at", "by", "in", "of", "on", "to", "up",
)  # fmt: skip


class TruncatePosition(StrEnum):
    START = "start"
    MIDDLE = "middle"
    END = "end"


class SymbolPosition(StrEnum):
    BEFORE = "before"
    AFTER = "after"


class CountdownFormat(StrEnum):
    SHORT = "short"
    LONG = "long"
    CUSTOM = "custom"


class ErrorPolicy(StrEnum):
    THROW = "throw"
    RETURN_NULL = "return-null"


class OptionsModel(BaseModel):
    """Base for every options record.

    Fields accept their snake_case name or the camelCase alias
    (``word_boundary`` / ``wordBoundary``). Instances are frozen: a resolved
    record is the effective configuration of exactly one call.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Global configuration sections
# ---------------------------------------------------------------------------


class FileUploadConfig(OptionsModel):
    max_size: float | None = None
    allowed_types: list[str] | None = None


class DateTimeConfig(OptionsModel):
    format: str | None = None
    timezone: str | None = None
    locale: str | None = None


class CurrencyConfig(OptionsModel):
    symbol: str | None = None
    decimals: int | None = None
    locale: str | None = None


class ValidationConfig(OptionsModel):
    email_domains: list[str] | None = None
    phone_country_code: str | None = None


class GlobalConfig(OptionsModel):
    """Process-wide defaults read by every operation.

    Only explicitly set fields take part in option resolution, so a section
    configured as ``{"symbol": "€"}`` overrides the symbol and nothing else.
    """

    crypto_secret: str | None = None
    file_upload: FileUploadConfig | None = None
    date_time: DateTimeConfig | None = None
    currency: CurrencyConfig | None = None
    error_messages: dict[str, str] | None = None
    validation: ValidationConfig | None = None


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


class TruncateOptions(OptionsModel):
    length: int = 10
    ellipsis: str = "..."
    position: TruncatePosition = TruncatePosition.END
    word_boundary: bool = False


class TitleCaseOptions(OptionsModel):
    lowercase_words: list[str] = Field(default_factory=lambda: list(DEFAULT_LOWERCASE_WORDS))
    uppercase_words: list[str] = Field(default_factory=list)
    separators: list[str] = Field(default_factory=lambda: [" ", "-", "_"])
    force_first_uppercase: bool = True
    locale: str = DEFAULT_LOCALE


class RegexMatchOptions(OptionsModel):
    flags: str = ""
    escape: bool = False
    global_: bool = Field(default=False, alias="global")


# ---------------------------------------------------------------------------
# Codes
# ---------------------------------------------------------------------------


class CodeOptions(OptionsModel):
    length: int = 6
    charset: str = DEFAULT_CHARSET
    prefix: str = ""
    suffix: str = ""
    separator: str = "-"
    segments: list[int] | None = None
    exclude_ambiguous: bool = False
    secure: bool = False


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class CurrencyOptions(OptionsModel):
    symbol: str = "$"
    symbol_position: SymbolPosition = SymbolPosition.BEFORE
    decimals: int = 2
    decimal_separator: str | None = None
    thousands_separator: str | None = None
    include_space: bool = False
    locale: str | None = DEFAULT_LOCALE
    negative_in_parentheses: bool = False


class CountdownLabels(OptionsModel):
    days: str | None = None
    hours: str | None = None
    minutes: str | None = None
    seconds: str | None = None
    days_plural: str | None = None
    hours_plural: str | None = None
    minutes_plural: str | None = None
    seconds_plural: str | None = None
    expired: str = ""


class CountdownOptions(OptionsModel):
    format: CountdownFormat = CountdownFormat.SHORT
    labels: CountdownLabels = Field(default_factory=CountdownLabels)
    show_zeros: bool = False
    max_units: int = 4
    separator: str = " "
    locale: str | None = DEFAULT_LOCALE


class DateFormatOptions(OptionsModel):
    format: str = "MM/dd/yyyy"
    timezone: str | None = None
    locale: str | None = DEFAULT_LOCALE


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class FileErrorMessages(OptionsModel):
    file_size: str | None = None
    file_type: str | None = None
    custom: str | None = None


class FileValidationOptions(OptionsModel):
    max_size: float = 5
    allowed_types: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TYPES))
    custom_validator: Callable[[Any], Any] | None = None
    error_messages: FileErrorMessages = Field(default_factory=FileErrorMessages)


class FileTypeOptions(OptionsModel):
    allowed_types: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TYPES))
    case_insensitive: bool = True
    allow_wildcard: bool = False


class ImageDimensionOptions(OptionsModel):
    on_error: ErrorPolicy = ErrorPolicy.THROW
    timeout: float = 5000


class FieldValidationOptions(OptionsModel):
    pattern: Pattern[str] | None = None
    error_message: str | None = None
    case_sensitive: bool = True
    custom_validator: Callable[[Any], Any] | None = None
    email_domains: list[str] | None = None
    phone_country_code: str | None = None


@runtime_checkable
class FileLike(Protocol):
    """Anything carrying a byte size and a MIME type, e.g. an upload handle."""

    @property
    def size(self) -> int: ...

    @property
    def type(self) -> str: ...


class UploadFile(BaseModel):
    """Minimal upload descriptor satisfying :class:`FileLike`."""

    model_config = ConfigDict(frozen=True)

    name: str
    size: int = Field(ge=0)
    type: str = ""


class ImageDimensions(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int


class ValidationResult(BaseModel):
    """Outcome of a validation check. Invalid input is a value, not an error."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    reason_code: str | None = None
    message: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, reason_code: str, message: str) -> ValidationResult:
        return cls(valid=False, reason_code=reason_code, message=message)

    @classmethod
    def from_custom(cls, verdict: Any, *, reason_code: str, default_message: str) -> ValidationResult:
        """Interpret a custom validator's return value.

        Only ``True`` passes. A non-empty string is taken as the failure
        message; any other value fails with *default_message*.
        """
        if verdict is True:
            return cls.ok()
        if isinstance(verdict, str) and verdict:
            return cls.fail(reason_code, verdict)
        return cls.fail(reason_code, default_message)
