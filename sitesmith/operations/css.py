"""
CSS task.

Compiles the Sass entry point and post-processes the result into an
expanded stylesheet and a minified copy.
"""

from pathlib import Path

import rcssmin
import sass

from sitesmith.config.paths import ProjectPaths
from sitesmith.config.settings import MIN_SUFFIX
from sitesmith.core.errors import BuildError
from sitesmith.core.stylesheet import add_webp_rules, autoprefix, group_media_queries
from sitesmith.utils.logging import logger


def compile_scss(entry: Path) -> str:
    """
    Compile a Sass entry point with expanded output.

    Raises:
        sass.CompileError: On Sass syntax or resolution errors
    """
    return sass.compile(
        filename=str(entry),
        output_style="expanded",
        include_paths=[str(entry.parent)],
    )


def postprocess(css: str) -> str:
    """Group media queries, add WebP background variants and vendor prefixes."""
    css = group_media_queries(css)
    css = add_webp_rules(css)
    return autoprefix(css, cascade=True)


def minify_css(css: str) -> str:
    return rcssmin.cssmin(css)


def build_css(paths: ProjectPaths) -> list[Path]:
    """
    Build style.css and style.min.css.

    Sass errors are logged and leave the previous output in place, so a typo
    saved during watch does not stop the loop.

    Returns:
        Written output paths (empty if compilation failed)
    """
    entries = paths.sources.css.files()
    if not entries:
        raise BuildError(f"Stylesheet entry point not found in {paths.sources.css.base}/")

    written = []
    for entry in entries:
        try:
            css = compile_scss(entry)
        except sass.CompileError as e:
            logger.error(f"Sass compilation failed for {entry.name}:")
            logger.error(str(e))
            return []

        css = postprocess(css)
        output = paths.build.css / f"{entry.stem}.css"
        minified = output.with_name(f"{entry.stem}{MIN_SUFFIX}.css")

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(css, encoding="utf-8")
        minified.write_text(minify_css(css), encoding="utf-8")
        written.extend([output, minified])

        logger.info(f"Created {output.relative_to(paths.root)}")
        logger.info(f"Created {minified.relative_to(paths.root)}")

    return written
