"""
HTML task.

Resolves include directives in top-level pages and offers WebP sources for
raster images.
"""

from pathlib import Path

from sitesmith.config.paths import ProjectPaths
from sitesmith.core.includes import resolve_file
from sitesmith.core.webp_html import add_webp_pictures
from sitesmith.utils.logging import logger


def build_html(paths: ProjectPaths) -> list[Path]:
    """
    Build every page in src/ that is not a partial (``_*.html``).

    Returns:
        Written output paths

    Raises:
        IncludeError: If a page includes a missing file
    """
    sources = paths.sources.html.files()
    if not sources:
        logger.warning(f"No pages found in {paths.src}/")
        return []

    written = []
    for source in sources:
        content = add_webp_pictures(resolve_file(source))

        output = paths.build.html / paths.sources.html.relative(source)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content, encoding="utf-8")
        written.append(output)
        logger.info(f"Created {output.relative_to(paths.root)}")

    logger.info(f"Built {len(written)} page(s)")
    return written
