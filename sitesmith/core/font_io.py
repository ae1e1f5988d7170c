"""
Font I/O utilities: web-font flavors and CFF to TrueType conversion.
"""

from pathlib import Path

from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont, newTable

# Maximum curve approximation error, in font units
MAX_ERR = 1.0
POST_FORMAT = 2.0


def save_flavor(source: Path, output: Path, flavor: str) -> None:
    """
    Save a font as a web-font flavor.

    Args:
        source: Any font fontTools can read (TTF, OTF, WOFF, WOFF2)
        output: Output path
        flavor: "woff" or "woff2"

    Raises:
        fontTools.ttLib.TTLibError: If the source is not a readable font
    """
    font = TTFont(source, recalcTimestamp=False)
    try:
        font.flavor = flavor
        output.parent.mkdir(parents=True, exist_ok=True)
        font.save(output)
    finally:
        font.close()


def glyphs_to_quadratic(glyph_set, max_err: float = MAX_ERR, reverse_direction: bool = True) -> dict:
    """Redraw every glyph through a cubic-to-quadratic pen."""
    quad_glyphs = {}
    for glyph_name in glyph_set.keys():
        tt_pen = TTGlyphPen(glyph_set)
        cu2qu_pen = Cu2QuPen(tt_pen, max_err, reverse_direction=reverse_direction)
        glyph_set[glyph_name].draw(cu2qu_pen)
        quad_glyphs[glyph_name] = tt_pen.glyph()
    return quad_glyphs


def update_hmtx(font: TTFont, glyf) -> None:
    """Set left side bearings from the new glyph bounds."""
    hmtx = font["hmtx"]
    for glyph_name, glyph in glyf.glyphs.items():
        if hasattr(glyph, "xMin"):
            hmtx[glyph_name] = (hmtx[glyph_name][0], glyph.xMin)


def otf_to_ttf(font: TTFont, max_err: float = MAX_ERR) -> None:
    """
    Convert a CFF-flavored font to TrueType outlines in place.

    Raises:
        ValueError: If the font has no CFF table
    """
    if font.sfntVersion != "OTTO" or "CFF " not in font:
        raise ValueError("Font does not contain a 'CFF ' table")

    glyph_order = font.getGlyphOrder()

    font["loca"] = newTable("loca")
    font["glyf"] = glyf = newTable("glyf")
    glyf.glyphOrder = glyph_order
    glyf.glyphs = glyphs_to_quadratic(font.getGlyphSet(), max_err)
    del font["CFF "]
    if "VORG" in font:
        del font["VORG"]
    glyf.compile(font)
    update_hmtx(font, glyf)

    font["maxp"] = maxp = newTable("maxp")
    maxp.tableVersion = 0x00010000
    maxp.maxZones = 1
    maxp.maxTwilightPoints = 0
    maxp.maxStorage = 0
    maxp.maxFunctionDefs = 0
    maxp.maxInstructionDefs = 0
    maxp.maxStackElements = 0
    maxp.maxSizeOfInstructions = 0
    maxp.maxComponentElements = max(
        len(g.components if hasattr(g, "components") else [])
        for g in glyf.glyphs.values()
    )
    maxp.compile(font)

    post = font["post"]
    post.formatType = POST_FORMAT
    post.extraNames = []
    post.mapping = {}
    post.glyphOrder = glyph_order
    try:
        post.compile(font)
    except OverflowError:
        post.formatType = 3

    font.sfntVersion = "\000\001\000\000"


def convert_otf_file(source: Path, output: Path) -> None:
    """Convert an .otf file to a .ttf file."""
    font = TTFont(source)
    try:
        otf_to_ttf(font)
        font.save(output)
    finally:
        font.close()


def font_basename(filename: str) -> str:
    """Family identifier of a font file: the name before its first dot."""
    return filename.split(".")[0]
