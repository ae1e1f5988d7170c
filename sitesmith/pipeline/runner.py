"""
Task orchestration.

Tasks are plain callables taking the project paths. ``series`` and
``parallel`` compose them into the composite build:

    build = clean, then in parallel:
        html, js, images, (fonts, then fontsStyle, then css)

The stylesheet imports the font manifest, so css waits for fontsStyle.
"""

import sys
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from sitesmith.config.paths import ProjectPaths
from sitesmith.operations.clean import clean
from sitesmith.operations.css import build_css
from sitesmith.operations.fonts import build_fonts, convert_otf, write_fonts_manifest
from sitesmith.operations.html import build_html
from sitesmith.operations.images import build_images
from sitesmith.operations.js import build_js
from sitesmith.operations.sprite import build_sprite
from sitesmith.utils.logging import logger


@dataclass(frozen=True)
class Task:
    """A named unit of work."""

    name: str
    func: Callable[[ProjectPaths], object]

    def __call__(self, paths: ProjectPaths) -> None:
        logger.info(f"Running {self.name}")
        start = time.perf_counter()
        self.func(paths)
        logger.info(f"{self.name} completed ({time.perf_counter() - start:.2f}s)")


def series(name: str, *tasks: Task) -> Task:
    """Compose tasks to run one after another, stopping at the first failure."""

    def run(paths: ProjectPaths) -> None:
        for task in tasks:
            task(paths)

    return Task(name, run)


def parallel(name: str, *tasks: Task) -> Task:
    """
    Compose tasks to run concurrently.

    Every task runs to completion; the first failure in declaration order is
    then re-raised.
    """

    def run(paths: ProjectPaths) -> None:
        with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
            futures = [executor.submit(task, paths) for task in tasks]

        failures = [
            (task, future.exception())
            for task, future in zip(tasks, futures)
            if future.exception() is not None
        ]
        for task, error in failures:
            logger.error(f"{task.name} failed: {error}")
        if failures:
            raise failures[0][1]

    return Task(name, run)


html = Task("html", build_html)
css = Task("css", build_css)
js = Task("js", build_js)
images = Task("images", build_images)
fonts = Task("fonts", build_fonts)
fonts_style = Task("fontsStyle", write_fonts_manifest)
otf2ttf = Task("otf2ttf", convert_otf)
svg_sprite = Task("svgSprite", build_sprite)
clean_task = Task("clean", clean)

build = series(
    "build",
    clean_task,
    parallel(
        "assets",
        html,
        js,
        images,
        series("fonts+css", fonts, fonts_style, css),
    ),
)

TASKS: dict[str, Task] = {
    task.name: task
    for task in (
        html,
        css,
        js,
        images,
        fonts,
        fonts_style,
        otf2ttf,
        svg_sprite,
        clean_task,
        build,
    )
}


def run_task(task: Task, paths: ProjectPaths) -> None:
    """
    Run a task, exiting with status 1 on failure.

    Args:
        task: Task to run
        paths: Project paths
    """
    try:
        task(paths)
    except Exception as e:
        logger.error(f"{task.name} failed: {e}")
        sys.exit(1)


def run_build(paths: ProjectPaths) -> None:
    """Run the composite build."""
    run_task(build, paths)
    logger.info("Build completed successfully")
