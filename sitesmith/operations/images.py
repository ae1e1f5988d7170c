"""
Images task.

Writes a WebP variant and an optimized original for every source image.
"""

from pathlib import Path

from sitesmith.config.paths import ProjectPaths
from sitesmith.core.images import encode_webp, has_webp_variant, optimize_image
from sitesmith.utils.logging import logger


def build_images(paths: ProjectPaths) -> list[Path]:
    """
    Encode WebP variants and optimized originals into the image build folder.

    Images that fail to decode are logged and skipped.

    Returns:
        Written output paths
    """
    sources = paths.sources.img.files()
    if not sources:
        logger.warning(f"No images found in {paths.sources.img.base}/")
        return []

    logger.info(f"Processing {len(sources)} image(s)")

    written = []
    failures: list[str] = []

    # WebP pass
    for source in sources:
        if not has_webp_variant(source):
            logger.debug(f"No WebP variant for {source.name}")
            continue
        output = (paths.build.img / paths.sources.img.relative(source)).with_suffix(".webp")
        try:
            encode_webp(source, output)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to encode {source.name} as WebP: {e}")
            failures.append(source.name)
            continue
        written.append(output)
        logger.debug(f"Created {output.relative_to(paths.root)}")

    # Optimized original pass
    for source in sources:
        output = paths.build.img / paths.sources.img.relative(source)
        try:
            data = optimize_image(source)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to optimize {source.name}: {e}")
            failures.append(source.name)
            continue
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)
        written.append(output)
        logger.debug(f"Created {output.relative_to(paths.root)}")

    logger.info(f"Wrote {len(written)} image file(s)")
    if failures:
        logger.warning(f"  Failed: {len(failures)} ({', '.join(sorted(set(failures)))})")
    return written
