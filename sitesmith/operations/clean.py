"""
Clean operation: removes the build folder.
"""

import shutil
from pathlib import Path

from sitesmith.config.paths import ProjectPaths
from sitesmith.core.errors import BuildError
from sitesmith.utils.logging import logger


def clean_directory(path: Path) -> None:
    """
    Delete a directory.

    Args:
        path: Path of the directory to delete

    Raises:
        BuildError: If the directory exists but cannot be removed
    """
    if path.exists():
        logger.info(f"Removing {path}/")
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise BuildError(f"Failed to remove {path}/: {e}") from e
        logger.info(f"Removed {path}/")
    else:
        logger.info(f"{path}/ does not exist (skipped)")


def clean(paths: ProjectPaths) -> None:
    """Remove the build folder."""
    clean_directory(paths.clean)
