"""Image dimension lookup through a pluggable decoder with a timeout."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import Protocol

import structlog
from PIL import Image

from utilkit.core.contracts import ErrorPolicy, ImageDimensionOptions, ImageDimensions
from utilkit.core.exceptions import InvalidSpecError, PlatformUnavailableError
from utilkit.core.registry import register_operation
from utilkit.core.resolver import OptionsInput, resolve_for

logger = structlog.get_logger()

ImageSource = bytes | bytearray | str | Path


class ImageDecoder(Protocol):
    """Contract for image decoding backends.

    Implementations return the pixel size of *source* or raise on failure.
    """

    async def decode(self, source: ImageSource) -> ImageDimensions: ...  # pragma: no cover


class PillowImageDecoder:
    """Reads the image header with Pillow in a worker thread."""

    async def decode(self, source: ImageSource) -> ImageDimensions:
        return await asyncio.to_thread(self._read_size, source)

    @staticmethod
    def _read_size(source: ImageSource) -> ImageDimensions:
        stream = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
        with Image.open(stream) as image:
            width, height = image.size
        return ImageDimensions(width=width, height=height)


@register_operation("get_image_dimensions", defaults=ImageDimensionOptions())
async def get_image_dimensions(
    source: ImageSource,
    options: OptionsInput = None,
    *,
    decoder: ImageDecoder | None = None,
) -> ImageDimensions | None:
    """Decode *source* and return its size, racing the decoder against ``timeout`` ms.

    On decoder failure or timeout, ``on_error="return-null"`` returns ``None``
    and ``on_error="throw"`` raises :class:`PlatformUnavailableError`.
    """
    opts: ImageDimensionOptions = resolve_for("get_image_dimensions", options)
    if opts.timeout <= 0:
        raise InvalidSpecError(f"timeout must be positive, got {opts.timeout}")

    backend = decoder if decoder is not None else PillowImageDecoder()
    try:
        return await asyncio.wait_for(backend.decode(source), timeout=opts.timeout / 1000)
    except Exception as exc:
        if isinstance(exc, TimeoutError):
            reason = f"Image decoding timed out after {opts.timeout:g}ms"
        else:
            reason = f"Image decoding failed: {exc}"
        logger.warning("image.decode_failed", reason=reason, on_error=str(opts.on_error))

        if opts.on_error is ErrorPolicy.RETURN_NULL:
            return None
        raise PlatformUnavailableError(reason) from exc
