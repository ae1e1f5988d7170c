"""
Main CLI entry point for sitesmith.

Running without a command is the same as ``sitesmith watch``.
"""

import click

from sitesmith import __version__
from sitesmith.config.paths import ProjectPaths
from sitesmith.config.settings import DEV_SERVER_PORT
from sitesmith.core.errors import BuildError
from sitesmith.utils.logging import set_verbose


class AliasedGroup(click.Group):
    """Click group that also accepts the camelCase task names."""

    ALIASES = {"fontsStyle": "fonts-style", "svgSprite": "svg-sprite"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.ALIASES.get(cmd_name, cmd_name))


@click.group(cls=AliasedGroup, invoke_without_command=True)
@click.version_option(version=__version__)
@click.option(
    "--root",
    type=click.Path(file_okay=False, exists=True),
    default=".",
    help="Project root directory. Defaults to the current directory.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx, root, verbose):
    """Static-site asset build pipeline."""
    set_verbose(verbose)
    try:
        ctx.obj = ProjectPaths.from_root(root)
    except BuildError as e:
        raise click.ClickException(str(e)) from e
    if ctx.invoked_subcommand is None:
        ctx.invoke(watch)


def _run(paths, name):
    from sitesmith.pipeline.runner import TASKS, run_task

    run_task(TASKS[name], paths)


@cli.command()
@click.pass_obj
def html(paths):
    """Build HTML pages with includes resolved."""
    _run(paths, "html")


@cli.command()
@click.pass_obj
def css(paths):
    """Compile Sass into style.css and style.min.css."""
    _run(paths, "css")


@cli.command()
@click.pass_obj
def js(paths):
    """Build script.js and script.min.js."""
    _run(paths, "js")


@cli.command()
@click.pass_obj
def images(paths):
    """Write WebP variants and optimized images."""
    _run(paths, "images")


@cli.command()
@click.pass_obj
def fonts(paths):
    """Convert fonts to WOFF and WOFF2."""
    _run(paths, "fonts")


@cli.command("fonts-style")
@click.option("--force", is_flag=True, help="Regenerate even if fonts.scss is not empty.")
@click.pass_obj
def fonts_style(paths, force):
    """Write font includes to src/scss/fonts.scss."""
    from sitesmith.operations.fonts import write_fonts_manifest
    from sitesmith.pipeline.runner import Task, run_task

    run_task(Task("fontsStyle", lambda p: write_fonts_manifest(p, force=force)), paths)


@cli.command()
@click.pass_obj
def otf2ttf(paths):
    """Convert src/fonts/*.otf to TrueType."""
    _run(paths, "otf2ttf")


@cli.command("svg-sprite")
@click.pass_obj
def svg_sprite(paths):
    """Pack src/iconsprite/*.svg into img/icons/icons.svg."""
    _run(paths, "svgSprite")


@cli.command()
@click.pass_obj
def clean(paths):
    """Remove the build folder."""
    _run(paths, "clean")


@cli.command()
@click.pass_obj
def build(paths):
    """Clean, then build every asset class."""
    from sitesmith.pipeline.runner import run_build

    run_build(paths)


@cli.command()
@click.option(
    "--port",
    type=int,
    default=DEV_SERVER_PORT,
    show_default=True,
    help="Dev server port.",
)
@click.pass_obj
def watch(paths, port):
    """Build, then serve with live reload and rebuild on change."""
    from sitesmith.pipeline.watch import watch as do_watch

    do_watch(paths, port)


if __name__ == "__main__":
    cli()
