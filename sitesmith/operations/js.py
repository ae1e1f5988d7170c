"""
JavaScript task.

Resolves include directives in the entry script, transpiles it for older
browsers when babel is installed, and writes a minified copy.
"""

from pathlib import Path

import rjsmin

from sitesmith.config.paths import ProjectPaths
from sitesmith.config.settings import MIN_SUFFIX
from sitesmith.core.errors import BuildError
from sitesmith.core.includes import resolve_file
from sitesmith.utils.logging import logger
from sitesmith.utils.subprocess import find_transpiler, run_transpiler


def minify_js(source: str) -> str:
    return rjsmin.jsmin(source)


def build_js(paths: ProjectPaths) -> list[Path]:
    """
    Build script.js and script.min.js.

    Returns:
        Written output paths

    Raises:
        IncludeError: If the script includes a missing file
        TranspileError: If babel fails
    """
    entries = paths.sources.js.files()
    if not entries:
        raise BuildError(f"Script entry point not found in {paths.sources.js.base}/")

    transpiler = find_transpiler(paths.root)
    if transpiler is None:
        logger.warning("babel not found, skipping transpilation")

    written = []
    for entry in entries:
        source = resolve_file(entry)
        if transpiler is not None:
            source = run_transpiler(transpiler, source, paths.root)

        output = paths.build.js / entry.name
        minified = output.with_name(f"{entry.stem}{MIN_SUFFIX}.js")

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(source, encoding="utf-8")
        minified.write_text(minify_js(source), encoding="utf-8")
        written.extend([output, minified])

        logger.info(f"Created {output.relative_to(paths.root)}")
        logger.info(f"Created {minified.relative_to(paths.root)}")

    return written
