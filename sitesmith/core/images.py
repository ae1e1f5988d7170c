"""
Image encoding with Pillow: WebP variants and size-optimized originals.
"""

import re
from io import BytesIO
from pathlib import Path

from PIL import Image

from sitesmith.config.settings import (
    GIF_INTERLACED,
    JPEG_PROGRESSIVE,
    WEBP_QUALITY,
    WEBP_SOURCE_EXTENSIONS,
)

_SVG_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_SVG_GAP_RE = re.compile(r">\s+<")

# Used when a .jpg file is not actually JPEG-encoded
JPEG_FALLBACK_QUALITY = 85


def has_webp_variant(path: Path) -> bool:
    """True for raster formats that get a separate WebP copy."""
    return path.suffix.lower() in WEBP_SOURCE_EXTENSIONS


def encode_webp(source: Path, output: Path, quality: int = WEBP_QUALITY) -> None:
    """
    Write a WebP copy of a raster image.

    Raises:
        OSError: If Pillow cannot decode the source (UnidentifiedImageError)
    """
    with Image.open(source) as image:
        if image.mode not in ("RGB", "RGBA"):
            has_alpha = "transparency" in image.info or image.mode in ("LA", "PA")
            image = image.convert("RGBA" if has_alpha else "RGB")
        output.parent.mkdir(parents=True, exist_ok=True)
        image.save(output, "WEBP", quality=quality)


def optimize_svg(text: str) -> str:
    """Strip comments and whitespace between tags; the viewBox is untouched."""
    text = _SVG_COMMENT_RE.sub("", text)
    return _SVG_GAP_RE.sub("><", text).strip()


def _reencode(source: Path) -> bytes | None:
    suffix = source.suffix.lower()
    if suffix not in (".jpg", ".jpeg", ".png", ".gif"):
        return None
    buffer = BytesIO()
    with Image.open(source) as image:
        if suffix in (".jpg", ".jpeg"):
            image.save(
                buffer,
                "JPEG",
                quality="keep" if image.format == "JPEG" else JPEG_FALLBACK_QUALITY,
                optimize=True,
                progressive=JPEG_PROGRESSIVE,
            )
        elif suffix == ".png":
            image.save(buffer, "PNG", optimize=True)
        else:
            image.save(buffer, "GIF", optimize=True, interlace=GIF_INTERLACED, save_all=True)
    return buffer.getvalue()


def optimize_image(source: Path) -> bytes:
    """
    Optimized bytes of an image in its original format.

    JPEG is re-encoded progressively with the source quantization tables, PNG
    and GIF losslessly. SVG is minified as text. Other formats, and results
    that would be larger than the source, fall back to the original bytes.

    Raises:
        OSError: If Pillow cannot decode a raster source
    """
    original = source.read_bytes()
    if source.suffix.lower() == ".svg":
        return optimize_svg(original.decode("utf-8")).encode("utf-8")

    optimized = _reencode(source)
    if optimized is None or len(optimized) >= len(original):
        return original
    return optimized
