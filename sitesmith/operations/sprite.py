"""
SVG sprite task.

Packs src/iconsprite/*.svg into a single stack sprite.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

from sitesmith.config.paths import ProjectPaths
from sitesmith.core.errors import BuildError
from sitesmith.core.sprite import build_stack_sprite
from sitesmith.utils.logging import logger


def build_sprite(paths: ProjectPaths) -> Path | None:
    """
    Write img/icons/icons.svg from the icon sources.

    Returns:
        The sprite path, or None if there are no icons

    Raises:
        BuildError: If an icon is not well-formed SVG
    """
    icons = paths.sources.sprite.files()
    if not icons:
        logger.warning(f"No icons found in {paths.sources.sprite.base}/")
        return None

    logger.info(f"Packing {len(icons)} icon(s)")
    try:
        sprite = build_stack_sprite(icons)
    except ET.ParseError as e:
        raise BuildError(f"Invalid SVG icon: {e}") from e

    output = paths.sprite_output
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(sprite)
    logger.info(f"Created {output.relative_to(paths.root)}")
    return output
