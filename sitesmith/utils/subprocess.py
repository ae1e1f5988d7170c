"""
Subprocess execution utilities with consistent error handling.
"""

import shutil
import subprocess
from pathlib import Path

from sitesmith.config.settings import TRANSPILER_ARGS, TRANSPILER_EXECUTABLE
from sitesmith.core.errors import TranspileError
from sitesmith.utils.logging import logger


def run_command(
    cmd: list[str],
    description: str | None = None,
    input_text: str | None = None,
    cwd: Path | None = None,
) -> subprocess.CompletedProcess:
    """
    Run a subprocess command with consistent logging and error handling.

    Args:
        cmd: Command and arguments to run
        description: Optional description for logging
        input_text: Optional text piped to the command's stdin
        cwd: Working directory for the command

    Returns:
        CompletedProcess result

    Raises:
        subprocess.CalledProcessError: If the command fails
    """
    if description:
        logger.info(description)

    try:
        result = subprocess.run(
            cmd,
            check=True,
            capture_output=True,
            text=True,
            input=input_text,
            cwd=cwd,
        )
    except subprocess.CalledProcessError as e:
        logger.error(f"Command failed: {' '.join(cmd)}")
        if e.stderr:
            logger.error(e.stderr)
        raise
    if result.stderr:
        logger.debug(result.stderr)
    return result


def find_transpiler(root: Path) -> Path | None:
    """
    Locate the babel CLI.

    Looks in the project's node_modules/.bin first, then on PATH.

    Args:
        root: Project root directory

    Returns:
        Path to the executable, or None when babel is not installed
    """
    local = root / "node_modules" / ".bin" / TRANSPILER_EXECUTABLE
    if local.exists():
        return local
    found = shutil.which(TRANSPILER_EXECUTABLE)
    return Path(found) if found else None


def run_transpiler(executable: Path, source: str, root: Path) -> str:
    """
    Transpile JavaScript source through babel's preset-env.

    Args:
        executable: babel CLI path
        source: JavaScript source text
        root: Project root, used as working directory so babel finds its presets

    Returns:
        Transpiled source

    Raises:
        TranspileError: If babel exits with an error
    """
    cmd = [str(executable), *TRANSPILER_ARGS]
    try:
        result = run_command(cmd, "Transpiling with babel", input_text=source, cwd=root)
    except (subprocess.CalledProcessError, OSError) as e:
        raise TranspileError(f"babel failed: {e}") from e
    return result.stdout
