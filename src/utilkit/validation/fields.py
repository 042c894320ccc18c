"""Email and phone-number field validation."""

from __future__ import annotations

import re

from utilkit.core.contracts import FieldValidationOptions, ValidationResult
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[0-9]{7,15}$")

# Stripped before the phone pattern is applied.
PHONE_PUNCTUATION = re.compile(r"[\s().\-]")

REASON_PATTERN = "pattern"
REASON_DOMAIN = "domain"
REASON_COUNTRY_CODE = "country_code"
REASON_CUSTOM = "custom"


def _compile(opts: FieldValidationOptions, default: re.Pattern[str]) -> re.Pattern[str]:
    pattern = opts.pattern or default
    if opts.case_sensitive:
        return pattern
    return re.compile(pattern.pattern, pattern.flags | re.IGNORECASE)


def _custom(opts: FieldValidationOptions, value: str, default_message: str) -> ValidationResult:
    if opts.custom_validator is None:
        return ValidationResult.ok()
    return ValidationResult.from_custom(
        opts.custom_validator(value),
        reason_code=REASON_CUSTOM,
        default_message=opts.error_message or default_message,
    )


@register_operation("validate_email", defaults=FieldValidationOptions(), config_slice="validation")
def validate_email(value: str, options: OptionsInput = None) -> ValidationResult:
    """Pattern, then allowed domains (``email_domains``), then the custom validator."""
    opts: FieldValidationOptions = resolve_for("validate_email", options)
    candidate = value.strip()

    if not _compile(opts, EMAIL_PATTERN).search(candidate):
        return ValidationResult.fail(REASON_PATTERN, opts.error_message or "Invalid email address")

    if opts.email_domains:
        domain = candidate.rsplit("@", 1)[-1].lower()
        allowed = {d.lower().lstrip("@") for d in opts.email_domains}
        if domain not in allowed:
            return ValidationResult.fail(
                REASON_DOMAIN,
                opts.error_message
                or f"Email domain must be one of: {', '.join(sorted(allowed))}",
            )

    return _custom(opts, candidate, "Invalid email address")


@register_operation(
    "validate_phone_number", defaults=FieldValidationOptions(), config_slice="validation"
)
def validate_phone_number(value: str, options: OptionsInput = None) -> ValidationResult:
    """Validate a phone number after stripping spaces, dots, dashes and parentheses.

    With ``phone_country_code``, international numbers (leading ``+``) must
    carry that code; national numbers are accepted as-is.
    """
    opts: FieldValidationOptions = resolve_for("validate_phone_number", options)
    candidate = PHONE_PUNCTUATION.sub("", value)

    if not _compile(opts, PHONE_PATTERN).search(candidate):
        return ValidationResult.fail(REASON_PATTERN, opts.error_message or "Invalid phone number")

    if opts.phone_country_code and candidate.startswith("+"):
        code = opts.phone_country_code.lstrip("+")
        if not candidate[1:].startswith(code):
            return ValidationResult.fail(
                REASON_COUNTRY_CODE,
                opts.error_message or f"Phone number must use country code +{code}",
            )

    return _custom(opts, candidate, "Invalid phone number")
