"""Checks and transforms for the files attached to an application.

Images are recompressed with Pillow so that neither side exceeds
``MAX_DIMENSION`` pixels and the encoded file fits in ``MAX_IMAGE_BYTES``.
Archives are only checked by name and size; their content is never opened.
"""
from __future__ import annotations
import io
import logging
from typing import Iterator, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import CompressionError
from .models import UploadedFile

logger = logging.getLogger(__name__)

MIB = 1024 * 1024

MAX_IMAGE_UPLOAD_BYTES = 20 * MIB
MAX_IMAGE_BYTES = 1 * MIB
MAX_DIMENSION = 1080
MIN_DIMENSION = 64
SHRINK_FACTOR = 0.75
LOSSY_QUALITIES = (90, 80, 70, 60, 50, 40)

MAX_ARCHIVE_BYTES = 50 * MIB
ARCHIVE_SUFFIX = ".zip"

# content type -> Pillow format
IMAGE_FORMATS = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}
_CANONICAL_TYPES = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}
_EXTENSIONS = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp"}


def validate_image(file: UploadedFile) -> Optional[str]:
    if file.content_type not in IMAGE_FORMATS:
        return "Please upload a valid image file (JPEG, PNG, or WebP)"
    if file.size > MAX_IMAGE_UPLOAD_BYTES:
        return "Image file is too large. Please select an image under 20MB"
    return None


def validate_archive(file: UploadedFile) -> Optional[str]:
    if not file.name.endswith(ARCHIVE_SUFFIX):
        return "Source code must be a .zip file"
    if file.size > MAX_ARCHIVE_BYTES:
        return "Source code file must be less than 50MB"
    return None


def image_extension(content_type: str) -> str:
    fmt = IMAGE_FORMATS.get(content_type)
    if fmt is None:
        raise CompressionError(f"Unsupported image type: {content_type}")
    return _EXTENSIONS[fmt]


def _open(file: UploadedFile) -> Image.Image:
    try:
        with Image.open(io.BytesIO(file.data)) as img:
            img.load()
            return ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise CompressionError() from e


def _normalize_mode(img: Image.Image, fmt: str) -> Image.Image:
    has_alpha = img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info)
    if fmt == "JPEG":
        return img if img.mode in ("RGB", "L") else img.convert("RGB")
    if fmt == "WEBP":
        target = "RGBA" if has_alpha else "RGB"
        return img if img.mode == target else img.convert(target)
    if img.mode in ("RGB", "RGBA", "L", "LA", "P"):
        return img
    return img.convert("RGBA" if has_alpha else "RGB")


def _candidates(img: Image.Image, fmt: str) -> Iterator[bytes]:
    """Encodings of ``img`` from best looking to smallest."""
    if fmt == "PNG":
        yield _encode(img, fmt, optimize=True)
        paletted = img.convert("RGBA").quantize(colors=256, method=Image.Quantize.FASTOCTREE)
        yield _encode(paletted, fmt, optimize=True)
        return
    for quality in LOSSY_QUALITIES:
        yield _encode(img, fmt, quality=quality)


def _encode(img: Image.Image, fmt: str, **params) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt, **params)
    return buf.getvalue()


def _conforms(img: Image.Image, size: int) -> bool:
    return max(img.size) <= MAX_DIMENSION and size <= MAX_IMAGE_BYTES


def compress_image(file: UploadedFile) -> UploadedFile:
    fmt = IMAGE_FORMATS.get(file.content_type)
    if fmt is None:
        raise CompressionError(f"Unsupported image type: {file.content_type}")

    img = _open(file)
    content_type = _CANONICAL_TYPES[fmt]
    if _conforms(img, file.size):
        return UploadedFile(name=file.name, content_type=content_type, data=file.data)

    img = _normalize_mode(img, fmt)
    img.thumbnail((MAX_DIMENSION, MAX_DIMENSION), Image.Resampling.LANCZOS)
    try:
        while True:
            for data in _candidates(img, fmt):
                if len(data) <= MAX_IMAGE_BYTES:
                    logger.debug("Compressed %s from %d to %d bytes (%dx%d)",
                                 file.name, file.size, len(data), *img.size)
                    return UploadedFile(name=file.name, content_type=content_type, data=data)
            width, height = img.size
            new_size = (int(width * SHRINK_FACTOR), int(height * SHRINK_FACTOR))
            if min(new_size) < MIN_DIMENSION:
                break
            img = img.resize(new_size, Image.Resampling.LANCZOS)
    except (OSError, ValueError) as e:
        raise CompressionError() from e

    raise CompressionError("Could not compress image under 1MB")
