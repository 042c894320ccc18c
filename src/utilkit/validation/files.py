"""Upload acceptability checks: size, MIME type, custom rule."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from utilkit.core.contracts import (
    FileLike,
    FileTypeOptions,
    FileValidationOptions,
    ValidationResult,
)
from utilkit.core.exceptions import InvalidSpecError
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for
from utilkit.core.store import get_config

MEGABYTE = 1024 * 1024
WILDCARD_SUBTYPE = "/*"

REASON_FILE_SIZE = "file_size"
REASON_FILE_TYPE = "file_type"
REASON_CUSTOM = "custom"

DEFAULT_ERROR_MESSAGES: dict[str, str] = {
    REASON_FILE_SIZE: "File size must not exceed {max_size}MB",
    REASON_FILE_TYPE: "File type {type} is not allowed. Allowed types: {allowed_types}",
    REASON_CUSTOM: "File failed custom validation",
}

# Keys looked up in the global ``error_messages`` table, per reason.
GLOBAL_MESSAGE_KEYS: dict[str, tuple[str, ...]] = {
    REASON_FILE_SIZE: ("fileSize", "file_size"),
    REASON_FILE_TYPE: ("fileType", "file_type"),
    REASON_CUSTOM: ("custom",),
}


class _TemplateValues(dict[str, Any]):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render_message(template: str, **values: Any) -> str:
    """Fill ``{name}`` placeholders; unknown names and malformed templates stay verbatim."""
    try:
        return template.format_map(_TemplateValues(values))
    except (ValueError, IndexError, AttributeError):
        return template


@register_operation(
    "is_file_type_allowed", defaults=FileTypeOptions(), config_slice="file_upload"
)
def is_file_type_allowed(mime_type: str, options: OptionsInput = None) -> bool:
    """Whether *mime_type* matches one of ``allowed_types``.

    With ``allow_wildcard``, an entry like ``image/*`` matches any subtype and
    ``*/*`` matches everything.
    """
    opts: FileTypeOptions = resolve_for("is_file_type_allowed", options)
    return _type_matches(mime_type, opts)


@register_operation(
    "image_type_allowed",
    defaults=FileTypeOptions(allowed_types=["image/*"], allow_wildcard=True),
)
def image_type_allowed(mime_type: str, options: OptionsInput = None) -> bool:
    """Like :func:`is_file_type_allowed`, restricted to ``image/`` types."""
    opts: FileTypeOptions = resolve_for("image_type_allowed", options)
    if not mime_type.strip().lower().startswith("image/"):
        return False
    return _type_matches(mime_type, opts)


def _type_matches(mime_type: str, opts: FileTypeOptions) -> bool:
    candidate = mime_type.strip()
    if opts.case_insensitive:
        candidate = candidate.lower()

    for entry in opts.allowed_types:
        allowed = entry.strip().lower() if opts.case_insensitive else entry.strip()
        if allowed == candidate:
            return True
        if not opts.allow_wildcard:
            continue
        if allowed in ("*", "*/*"):
            return True
        if allowed.endswith(WILDCARD_SUBTYPE) and "/" in candidate:
            if candidate.split("/", 1)[0] == allowed[: -len(WILDCARD_SUBTYPE)]:
                return True
    return False


@register_operation(
    "validate_file_before_upload", defaults=FileValidationOptions(), config_slice="file_upload"
)
def validate_file_before_upload(file: FileLike, options: OptionsInput = None) -> ValidationResult:
    """Check size, then type, then the custom validator; stop at the first failure."""
    config = get_config()
    opts: FileValidationOptions = resolve_for("validate_file_before_upload", options, config=config)
    if opts.max_size <= 0:
        raise InvalidSpecError(f"max_size must be positive, got {opts.max_size}")
    messages = _MessageSource(opts, config.error_messages or {})

    template_values = {
        "max_size": f"{opts.max_size:g}",
        "allowed_types": ", ".join(opts.allowed_types),
        "type": file.type or "unknown",
        "size": file.size,
    }

    if file.size > opts.max_size * MEGABYTE:
        return _failure(REASON_FILE_SIZE, messages, template_values)

    if not _type_matches(file.type or "", FileTypeOptions(allowed_types=opts.allowed_types)):
        return _failure(REASON_FILE_TYPE, messages, template_values)

    if opts.custom_validator is not None:
        verdict = opts.custom_validator(file)
        return ValidationResult.from_custom(
            verdict,
            reason_code=REASON_CUSTOM,
            default_message=messages.render(REASON_CUSTOM, template_values),
        )

    return ValidationResult.ok()


class _MessageSource:
    """Call-site message, then the global ``error_messages`` table, then the default."""

    def __init__(self, opts: FileValidationOptions, table: Mapping[str, str]) -> None:
        self._opts = opts
        self._table = table

    def render(self, reason: str, values: dict[str, Any]) -> str:
        template = getattr(self._opts.error_messages, reason)
        if template is None:
            template = next(
                (self._table[key] for key in GLOBAL_MESSAGE_KEYS[reason] if key in self._table),
                DEFAULT_ERROR_MESSAGES[reason],
            )
        return render_message(template, **values)


def _failure(reason: str, messages: _MessageSource, values: dict[str, Any]) -> ValidationResult:
    return ValidationResult.fail(reason, messages.render(reason, values))
