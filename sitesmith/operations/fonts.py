"""
Font operations.

Converts source fonts to web-font formats, converts OTF sources to TTF, and
generates the fonts.scss manifest from the built fonts.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from fontTools.ttLib import TTLibError

from sitesmith.config.paths import ProjectPaths
from sitesmith.config.settings import FONT_FLAVORS, FONT_STYLE, FONT_WEIGHT
from sitesmith.core.errors import BuildError
from sitesmith.core.font_io import convert_otf_file, font_basename, save_flavor
from sitesmith.utils.logging import logger


def convert_flavor(paths: ProjectPaths, sources: list[Path], flavor: str) -> list[Path]:
    """
    Convert fonts to one web-font flavor.

    Fonts fontTools cannot read are logged and skipped.

    Returns:
        Written output paths
    """
    written = []
    for source in sources:
        relative = paths.sources.fonts.relative(source)
        output = (paths.build.fonts / relative).with_suffix(f".{flavor}")
        try:
            save_flavor(source, output, flavor)
        except (TTLibError, OSError, ValueError) as e:
            logger.warning(f"Cannot convert {source.name} to {flavor}: {e}")
            continue
        written.append(output)
        logger.debug(f"Created {output.relative_to(paths.root)}")
    return written


def build_fonts(paths: ProjectPaths) -> list[Path]:
    """
    Convert every source font to WOFF and WOFF2.

    The flavor passes run concurrently.

    Returns:
        Written output paths
    """
    sources = paths.sources.fonts.files()
    if not sources:
        logger.warning(f"No fonts found in {paths.sources.fonts.base}/")
        return []

    logger.info(f"Converting {len(sources)} font(s) to {', '.join(FONT_FLAVORS)}")

    with ThreadPoolExecutor(max_workers=len(FONT_FLAVORS)) as executor:
        futures = [
            executor.submit(convert_flavor, paths, sources, flavor)
            for flavor in FONT_FLAVORS
        ]
        written = [path for future in futures for path in future.result()]

    logger.info(f"Wrote {len(written)} font file(s)")
    return written


def convert_otf(paths: ProjectPaths) -> list[Path]:
    """
    Convert src/fonts/*.otf to TrueType beside the sources.

    Returns:
        Written output paths

    Raises:
        BuildError: If a source is not a CFF-flavored OpenType font
    """
    sources = paths.sources.otf.files()
    if not sources:
        logger.warning(f"No .otf files found in {paths.sources.otf.base}/")
        return []

    written = []
    for source in sources:
        output = source.with_suffix(".ttf")
        logger.info(f"Converting {source.name} to TrueType")
        try:
            convert_otf_file(source, output)
        except (TTLibError, ValueError) as e:
            raise BuildError(f"Cannot convert {source.name}: {e}") from e
        written.append(output)
        logger.info(f"Created {output.relative_to(paths.root)}")
    return written


def font_include(name: str) -> str:
    """One manifest line for a font family."""
    return f'@include font("{name}", "{name}", "{FONT_WEIGHT}", "{FONT_STYLE}");\r\n'


def font_families(fonts_dir: Path) -> list[str]:
    """
    Distinct font basenames in a directory, in sorted listing order.

    ``a.woff``, ``a.woff2`` and ``b.woff`` yield ``["a", "b"]``.
    """
    if not fonts_dir.is_dir():
        return []

    families: list[str] = []
    seen: set[str] = set()
    for filename in sorted(os.listdir(fonts_dir)):
        name = font_basename(filename)
        if name in seen:
            continue
        seen.add(name)
        families.append(name)
    return families


def write_fonts_manifest(paths: ProjectPaths, force: bool = False) -> bool:
    """
    Generate src/scss/fonts.scss from the built fonts.

    The manifest is only written while it is empty (or missing), so manual
    edits survive later builds. ``force`` regenerates it regardless.

    Returns:
        True if the manifest was written
    """
    manifest = paths.fonts_manifest
    if manifest.exists() and manifest.stat().st_size > 0 and not force:
        logger.info(f"{manifest.name} already populated (skipped)")
        return False

    families = font_families(paths.build.fonts)
    manifest.parent.mkdir(parents=True, exist_ok=True)
    with manifest.open("w", encoding="utf-8", newline="") as f:
        for name in families:
            f.write(font_include(name))

    logger.info(f"Wrote {len(families)} font include(s) to {manifest.relative_to(paths.root)}")
    return True
