"""Font and image builders for tests."""

from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from PIL import Image


def _draw_box(pen) -> None:
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((500, 700))
    pen.lineTo((500, 0))
    pen.closePath()


def _setup_common(fb: FontBuilder, family: str) -> None:
    fb.setupCharacterMap({ord("A"): "A"})
    fb.setupHorizontalMetrics({".notdef": (500, 0), "A": (600, 100)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()


def make_ttf(path: Path, family: str = "Test") -> Path:
    """Write a minimal TrueType font with one box glyph."""
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "A"])
    pen = TTGlyphPen(None)
    _draw_box(pen)
    fb.setupGlyf({".notdef": TTGlyphPen(None).glyph(), "A": pen.glyph()})
    _setup_common(fb, family)
    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path


def make_otf(path: Path, family: str = "Test") -> Path:
    """Write a minimal CFF OpenType font with one box glyph."""
    fb = FontBuilder(1000, isTTF=False)
    fb.setupGlyphOrder([".notdef", "A"])
    pen = T2CharStringPen(600, None)
    _draw_box(pen)
    char_strings = {
        ".notdef": T2CharStringPen(500, None).getCharString(),
        "A": pen.getCharString(),
    }
    fb.setupCFF(f"{family}-Regular", {"FullName": family}, char_strings, {})
    _setup_common(fb, family)
    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path


def make_image(path: Path, fmt: str, color: str = "red") -> Path:
    """Write a small raster image."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (64, 64), color).save(path, fmt)
    return path
