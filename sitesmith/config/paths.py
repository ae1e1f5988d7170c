"""
Filesystem path conventions for a site project.

Centralizes the source/build/watch layout so tasks never build paths by hand.
The build folder is named after the project directory itself.
"""

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path

from sitesmith.core.errors import BuildError

SRC_DIRNAME = "src"

IMAGE_EXTENSIONS = (".jpg", ".png", ".svg", ".gif", ".ico", ".webp")
FONT_EXTENSIONS = (".eot", ".woff", ".woff2", ".ttf", ".svg")


@dataclass(frozen=True)
class SourceGlob:
    """
    A set of source files rooted at a glob base.

    Files are matched with ``base.glob(pattern)``, filtered by extension and
    by an optional filename exclusion pattern. Paths relative to ``base`` are
    preserved in the output tree.
    """

    base: Path
    pattern: str
    extensions: tuple[str, ...] = ()
    exclude: str | None = None

    def accepts(self, path: Path) -> bool:
        """Apply the extension and exclusion filters to a globbed path."""
        if self.extensions and path.suffix.lower() not in self.extensions:
            return False
        if self.exclude and fnmatch(path.name, self.exclude):
            return False
        return True

    def files(self) -> list[Path]:
        """List matching files, sorted by path."""
        if not self.base.exists():
            return []
        return sorted(
            p for p in self.base.glob(self.pattern) if p.is_file() and self.accepts(p)
        )

    def relative(self, path: Path) -> Path:
        """Path of a matched file relative to the glob base."""
        return path.relative_to(self.base)


@dataclass(frozen=True)
class WatchTarget:
    """A directory watched for changes to files with the given extensions."""

    directory: Path
    extensions: tuple[str, ...]

    def ignores(self, filename: str) -> bool:
        """True for files whose changes should not trigger the task."""
        return Path(filename).suffix.lower() not in self.extensions


@dataclass(frozen=True)
class BuildDirs:
    """Output directories, one per asset class."""

    html: Path
    css: Path
    js: Path
    img: Path
    fonts: Path


@dataclass(frozen=True)
class SourceSets:
    """Source file sets, one per asset class."""

    html: SourceGlob
    css: SourceGlob
    js: SourceGlob
    img: SourceGlob
    fonts: SourceGlob
    otf: SourceGlob
    sprite: SourceGlob


@dataclass(frozen=True)
class WatchSets:
    """Watch targets for the asset classes rebuilt by the watch loop."""

    html: WatchTarget
    scss: WatchTarget
    js: WatchTarget
    img: WatchTarget


@dataclass(frozen=True)
class ProjectPaths:
    """All paths a build needs, derived from the project root."""

    root: Path
    src: Path
    dist: Path
    build: BuildDirs = field(repr=False)
    sources: SourceSets = field(repr=False)
    watch: WatchSets = field(repr=False)
    fonts_manifest: Path = field(repr=False)
    sprite_output: Path = field(repr=False)

    @property
    def clean(self) -> Path:
        """Directory removed by the clean task."""
        return self.dist

    @classmethod
    def from_root(cls, root: Path | str = ".") -> "ProjectPaths":
        """
        Resolve the path convention for a project directory.

        Raises:
            BuildError: If the build folder would be the project root or the
                source tree, which clean would then delete
        """
        root = Path(root).resolve()
        src = root / SRC_DIRNAME
        dist = root / root.name
        if dist == root or dist == src or src in dist.parents:
            raise BuildError(f"Cannot use {root} as project root: build folder would be {dist}")

        build = BuildDirs(
            html=dist,
            css=dist / "css",
            js=dist / "js",
            img=dist / "img",
            fonts=dist / "fonts",
        )
        sources = SourceSets(
            html=SourceGlob(src, "*.html", (".html",), exclude="_*.html"),
            css=SourceGlob(src / "scss", "style.scss"),
            js=SourceGlob(src / "js", "script.js"),
            img=SourceGlob(src / "img", "**/*", IMAGE_EXTENSIONS),
            fonts=SourceGlob(src / "fonts", "**/*", FONT_EXTENSIONS),
            otf=SourceGlob(src / "fonts", "*.otf", (".otf",)),
            sprite=SourceGlob(src / "iconsprite", "*.svg", (".svg",)),
        )
        watch = WatchSets(
            html=WatchTarget(src, (".html",)),
            scss=WatchTarget(src / "scss", (".scss",)),
            js=WatchTarget(src / "js", (".js",)),
            img=WatchTarget(src / "img", IMAGE_EXTENSIONS),
        )
        return cls(
            root=root,
            src=src,
            dist=dist,
            build=build,
            sources=sources,
            watch=watch,
            fonts_manifest=src / "scss" / "fonts.scss",
            sprite_output=build.img / "icons" / "icons.svg",
        )
