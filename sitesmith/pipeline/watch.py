"""
Watch loop and development server.

Builds once, then serves the build folder with livereload and re-runs the
matching asset task whenever a watched source file changes.
"""

from collections.abc import Callable

from livereload import Server

from sitesmith.config.paths import ProjectPaths, WatchTarget
from sitesmith.config.settings import DEV_SERVER_HOST, DEV_SERVER_PORT
from sitesmith.pipeline.runner import Task, build, css, html, images, js
from sitesmith.utils.logging import logger


def watch_targets(paths: ProjectPaths) -> list[tuple[WatchTarget, Task]]:
    """Pairs of watched directory and the task its changes trigger."""
    return [
        (paths.watch.html, html),
        (paths.watch.scss, css),
        (paths.watch.js, js),
        (paths.watch.img, images),
    ]


def rebuild_callback(task: Task, paths: ProjectPaths) -> Callable[[], None]:
    """
    Wrap a task for the watcher.

    Failures are logged and swallowed so the loop keeps serving.
    """

    def rebuild() -> None:
        try:
            task(paths)
        except Exception as e:
            logger.error(f"{task.name} failed: {e}")

    return rebuild


def create_server(paths: ProjectPaths) -> Server:
    """Register one watch per asset class on a livereload server."""
    server = Server()
    for target, task in watch_targets(paths):
        if not target.directory.exists():
            logger.debug(f"Not watching missing {target.directory}/")
            continue
        server.watch(
            str(target.directory),
            rebuild_callback(task, paths),
            ignore=target.ignores,
        )
    return server


def watch(paths: ProjectPaths, port: int = DEV_SERVER_PORT) -> None:
    """
    Build, then watch sources and serve the build folder until interrupted.

    A failing initial build is logged and the server still starts.
    """
    rebuild_callback(build, paths)()
    paths.dist.mkdir(parents=True, exist_ok=True)

    server = create_server(paths)
    logger.info(f"Serving {paths.dist} at http://{DEV_SERVER_HOST}:{port}")
    server.serve(port=port, host=DEV_SERVER_HOST, root=str(paths.dist))
