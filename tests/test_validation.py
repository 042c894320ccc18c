"""Tests for file, image, field and schema validation."""

from __future__ import annotations

import asyncio
import io
import re
from typing import Annotated

import pytest
from PIL import Image
from pydantic import BaseModel, TypeAdapter, ValidationError

from utilkit.core.contracts import ImageDimensions, UploadFile, ValidationResult
from utilkit.core.exceptions import InvalidSpecError, PlatformUnavailableError
from utilkit.core.store import configure
from utilkit.validation.fields import validate_email, validate_phone_number
from utilkit.validation.files import (
    image_type_allowed,
    is_file_type_allowed,
    render_message,
    validate_file_before_upload,
)
from utilkit.validation.images import get_image_dimensions
from utilkit.validation.schemas import IssueCollector, numeric_enum, refine

MEGABYTE = 1024 * 1024

Level = numeric_enum((10, 20, 30))


def _png_bytes(width: int = 3, height: int = 2) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color="red").save(buffer, format="PNG")
    return buffer.getvalue()


class _FixedDecoder:
    def __init__(self, width: int, height: int) -> None:
        self.dimensions = ImageDimensions(width=width, height=height)

    async def decode(self, source):
        return self.dimensions


class _SlowDecoder:
    async def decode(self, source):
        await asyncio.sleep(1)
        return ImageDimensions(width=1, height=1)


class _BrokenDecoder:
    async def decode(self, source):
        raise OSError("corrupt header")


# ---------------------------------------------------------------------------
# MIME type checks
# ---------------------------------------------------------------------------


@pytest.mark.offline
class TestIsFileTypeAllowed:
    def test_exact_match(self):
        assert is_file_type_allowed("image/png") is True
        assert is_file_type_allowed("application/pdf") is False

    def test_case_insensitive_by_default(self):
        assert is_file_type_allowed("IMAGE/PNG", {"allowedTypes": ["image/png"]}) is True

    def test_case_sensitive(self):
        options = {"allowedTypes": ["image/png"], "caseInsensitive": False}
        assert is_file_type_allowed("IMAGE/PNG", options) is False
        assert is_file_type_allowed("image/png", options) is True

    def test_wildcard_subtype(self):
        options = {"allowed_types": ["image/*"], "allow_wildcard": True}
        assert is_file_type_allowed("image/webp", options) is True
        assert is_file_type_allowed("video/mp4", options) is False

    def test_wildcard_ignored_when_disabled(self):
        assert is_file_type_allowed("image/webp", {"allowed_types": ["image/*"]}) is False

    def test_match_everything(self):
        options = {"allowed_types": ["*/*"], "allow_wildcard": True}
        assert is_file_type_allowed("application/zip", options) is True

    def test_global_section_applies(self):
        configure({"fileUpload": {"allowedTypes": ["application/pdf"]}})
        assert is_file_type_allowed("application/pdf") is True
        assert is_file_type_allowed("image/png") is False

    def test_image_type_allowed(self):
        assert image_type_allowed("image/webp") is True
        assert image_type_allowed("application/pdf") is False
        assert image_type_allowed("image/jpeg", {"allowedTypes": ["image/png"]}) is False


# ---------------------------------------------------------------------------
# Upload validation
# ---------------------------------------------------------------------------


@pytest.mark.offline
class TestValidateFileBeforeUpload:
    def test_accepts_small_png(self, png_upload):
        result = validate_file_before_upload(png_upload)
        assert result == ValidationResult.ok()

    def test_rejects_oversized(self, oversized_upload):
        result = validate_file_before_upload(oversized_upload)
        assert result.valid is False
        assert result.reason_code == "file_size"
        assert result.message == "File size must not exceed 5MB"

    def test_size_limit_is_inclusive(self):
        upload = UploadFile(name="edge.png", size=5 * MEGABYTE, type="image/png")
        assert validate_file_before_upload(upload).valid is True

    def test_rejects_disallowed_type(self, pdf_upload):
        result = validate_file_before_upload(pdf_upload)
        assert result.reason_code == "file_type"
        assert result.message == (
            "File type application/pdf is not allowed. "
            "Allowed types: image/png, image/jpeg, image/gif"
        )

    def test_size_checked_before_type(self):
        upload = UploadFile(name="huge.pdf", size=6 * MEGABYTE, type="application/pdf")
        assert validate_file_before_upload(upload).reason_code == "file_size"

    def test_type_case_insensitive(self):
        upload = UploadFile(name="a.png", size=10, type="IMAGE/PNG")
        assert validate_file_before_upload(upload).valid is True

    def test_custom_validator_false_uses_default_message(self, png_upload):
        result = validate_file_before_upload(png_upload, {"customValidator": lambda f: False})
        assert result.reason_code == "custom"
        assert result.message == "File failed custom validation"

    def test_custom_validator_string_is_the_message(self, png_upload):
        result = validate_file_before_upload(
            png_upload, {"custom_validator": lambda f: "Avatars must be square"}
        )
        assert result.valid is False
        assert result.message == "Avatars must be square"

    def test_custom_validator_true_passes(self, png_upload):
        seen = []
        result = validate_file_before_upload(
            png_upload, {"custom_validator": lambda f: seen.append(f.name) or True}
        )
        assert result.valid is True
        assert seen == ["avatar.png"]

    def test_custom_validator_not_called_after_failure(self, pdf_upload):
        calls = []
        validate_file_before_upload(pdf_upload, {"custom_validator": calls.append})
        assert calls == []

    def test_call_site_message(self, oversized_upload):
        options = {"errorMessages": {"fileSize": "Too big (max {max_size}MB)"}}
        assert validate_file_before_upload(oversized_upload, options).message == "Too big (max 5MB)"

    def test_global_message_table(self, pdf_upload):
        configure({"errorMessages": {"fileType": "Nope: {type}"}})
        assert validate_file_before_upload(pdf_upload).message == "Nope: application/pdf"

    def test_call_site_message_beats_global_table(self, pdf_upload):
        configure({"errorMessages": {"fileType": "Nope: {type}"}})
        options = {"error_messages": {"file_type": "Wrong type"}}
        assert validate_file_before_upload(pdf_upload, options).message == "Wrong type"

    def test_global_limits_apply(self, oversized_upload):
        configure({"fileUpload": {"maxSize": 10}})
        assert validate_file_before_upload(oversized_upload).valid is True
        assert validate_file_before_upload(oversized_upload, {"maxSize": 1}).valid is False

    def test_global_allowed_types_apply(self, pdf_upload):
        configure({"fileUpload": {"allowedTypes": ["application/pdf"]}})
        assert validate_file_before_upload(pdf_upload).valid is True

    def test_non_positive_max_size_rejected(self, png_upload):
        with pytest.raises(InvalidSpecError):
            validate_file_before_upload(png_upload, {"max_size": 0})


@pytest.mark.offline
def test_render_message_keeps_unknown_placeholders():
    assert render_message("{type} / {nope}", type="image/png") == "image/png / {nope}"
    assert render_message("broken {", type="x") == "broken {"


# ---------------------------------------------------------------------------
# Image dimensions
# ---------------------------------------------------------------------------


@pytest.mark.offline
class TestGetImageDimensions:
    @pytest.mark.asyncio
    async def test_custom_decoder(self):
        result = await get_image_dimensions(b"ignored", decoder=_FixedDecoder(640, 480))
        assert result == ImageDimensions(width=640, height=480)

    @pytest.mark.asyncio
    async def test_pillow_reads_bytes(self):
        result = await get_image_dimensions(_png_bytes(3, 2))
        assert result == ImageDimensions(width=3, height=2)

    @pytest.mark.asyncio
    async def test_pillow_reads_path(self, tmp_path):
        path = tmp_path / "pixel.png"
        path.write_bytes(_png_bytes(5, 7))
        result = await get_image_dimensions(str(path))
        assert result == ImageDimensions(width=5, height=7)

    @pytest.mark.asyncio
    async def test_timeout_raises_by_default(self):
        with pytest.raises(PlatformUnavailableError, match="timed out"):
            await get_image_dimensions(b"x", {"timeout": 10}, decoder=_SlowDecoder())

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        options = {"timeout": 10, "onError": "return-null"}
        assert await get_image_dimensions(b"x", options, decoder=_SlowDecoder()) is None

    @pytest.mark.asyncio
    async def test_decoder_failure_raises_with_cause(self):
        with pytest.raises(PlatformUnavailableError) as excinfo:
            await get_image_dimensions(b"x", decoder=_BrokenDecoder())
        assert isinstance(excinfo.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_garbage_bytes_return_none(self):
        result = await get_image_dimensions(b"not an image", {"on_error": "return-null"})
        assert result is None

    @pytest.mark.asyncio
    async def test_non_positive_timeout_rejected(self):
        with pytest.raises(InvalidSpecError):
            await get_image_dimensions(b"x", {"timeout": 0}, decoder=_FixedDecoder(1, 1))


# ---------------------------------------------------------------------------
# Email / phone
# ---------------------------------------------------------------------------


@pytest.mark.offline
class TestValidateEmail:
    def test_valid(self):
        assert validate_email("user@example.com").valid is True

    def test_invalid_pattern(self):
        result = validate_email("not-an-email")
        assert result.reason_code == "pattern"
        assert result.message == "Invalid email address"

    def test_global_domains(self):
        configure({"validation": {"emailDomains": ["example.com"]}})
        assert validate_email("User@EXAMPLE.com").valid is True
        result = validate_email("user@other.org")
        assert result.reason_code == "domain"

    def test_custom_pattern_case_insensitive(self):
        pattern = re.compile(r"^[a-z]+@corp\.io$")
        assert validate_email("ADMIN@corp.io", {"pattern": pattern}).valid is False
        options = {"pattern": pattern, "caseSensitive": False}
        assert validate_email("ADMIN@corp.io", options).valid is True

    def test_custom_validator_message(self):
        result = validate_email("user@example.com", {"customValidator": lambda v: "Blocked"})
        assert result.reason_code == "custom"
        assert result.message == "Blocked"

    def test_error_message_override(self):
        result = validate_email("bad", {"errorMessage": "Check your email"})
        assert result.message == "Check your email"


@pytest.mark.offline
class TestValidatePhoneNumber:
    def test_international_with_punctuation(self):
        assert validate_phone_number("+1 (555) 123-4567").valid is True

    def test_too_short_or_letters(self):
        assert validate_phone_number("12ab").reason_code == "pattern"
        assert validate_phone_number("12345").valid is False

    def test_country_code(self):
        configure({"validation": {"phoneCountryCode": "+44"}})
        assert validate_phone_number("+1 555 123 4567").reason_code == "country_code"
        assert validate_phone_number("+44 20 7946 0958").valid is True
        assert validate_phone_number("555 123 4567").valid is True


# ---------------------------------------------------------------------------
# Numeric enum schema
# ---------------------------------------------------------------------------


@pytest.mark.offline
class TestNumericEnum:
    def test_accepts_member(self):
        adapter = TypeAdapter(numeric_enum((1, 2, 3)))
        assert adapter.validate_python(2) == 2

    def test_accepts_float_members(self):
        adapter = TypeAdapter(numeric_enum((0.5, 1.5)))
        assert adapter.validate_python(1.5) == 1.5

    def test_rejects_non_member_with_context(self):
        adapter = TypeAdapter(numeric_enum((1, 2, 3)))
        with pytest.raises(ValidationError) as excinfo:
            adapter.validate_python(5)
        error = excinfo.value.errors()[0]
        assert error["type"] == "invalid_value"
        assert error["msg"] == "Input should be one of [1, 2, 3]"
        assert error["ctx"]["values"] == [1, 2, 3]
        assert error["ctx"]["input"] == 5

    def test_rejects_numeric_strings(self):
        adapter = TypeAdapter(numeric_enum((1, 2, 3)))
        with pytest.raises(ValidationError):
            adapter.validate_python("2")

    def test_rejects_booleans(self):
        adapter = TypeAdapter(numeric_enum((0, 1)))
        with pytest.raises(ValidationError):
            adapter.validate_python(True)
        assert adapter.validate_python(1) == 1

    def test_as_model_field(self):
        class Settings(BaseModel):
            level: Level

        assert Settings(level=20).level == 20
        with pytest.raises(ValidationError, match="Input should be one of"):
            Settings(level=25)

    def test_bad_arguments_rejected(self):
        with pytest.raises(InvalidSpecError):
            numeric_enum(())
        with pytest.raises(InvalidSpecError):
            numeric_enum(("a",))
        with pytest.raises(InvalidSpecError):
            numeric_enum((True, 2))

    def test_refine_raises_first_issue(self):
        def _even(value, report):
            if value % 2:
                report(code="not_even", message="{value} is odd", value=value)
            if value > 100:
                report(code="too_big", message="too big")

        adapter = TypeAdapter(Annotated[int, refine(_even)])
        assert adapter.validate_python(4) == 4
        with pytest.raises(ValidationError) as excinfo:
            adapter.validate_python(101)
        assert excinfo.value.errors()[0]["type"] == "not_even"
        assert excinfo.value.errors()[0]["msg"] == "101 is odd"

    def test_issue_collector_records_everything(self):
        collector = IssueCollector()
        collector(code="a", message="first")
        collector(code="b", message="second", extra=1)
        assert [issue.code for issue in collector.issues] == ["a", "b"]
        assert collector.issues[1].context == {"extra": 1}
