"""Shared pytest fixtures."""

import pytest

from sitesmith.config.paths import ProjectPaths
from tests.helpers import make_image, make_ttf


@pytest.fixture
def project_root(tmp_path):
    """An empty project directory with the src/ layout."""
    root = tmp_path / "site"
    for sub in ("scss", "js", "img", "fonts", "iconsprite"):
        (root / "src" / sub).mkdir(parents=True)
    return root


@pytest.fixture
def paths(project_root):
    return ProjectPaths.from_root(project_root)


@pytest.fixture
def sample_project(project_root):
    """A project with one source file or more per asset class."""
    src = project_root / "src"
    (src / "index.html").write_text(
        "<html><body>@@include('_header.html', {\"title\": \"Home\"})"
        '<img src="img/photo.jpg" alt=""></body></html>\n',
        encoding="utf-8",
    )
    (src / "about.html").write_text(
        "<html><body>@@include('_header.html', {\"title\": \"About\"})</body></html>\n",
        encoding="utf-8",
    )
    (src / "_header.html").write_text("<h1>@@title</h1>", encoding="utf-8")

    (src / "scss" / "fonts.scss").write_text("", encoding="utf-8")
    (src / "scss" / "_mixins.scss").write_text(
        "@mixin font($name, $file, $weight, $style) {\n"
        "  @font-face {\n"
        "    font-family: $name;\n"
        '    src: url("../fonts/#{$file}.woff2") format("woff2");\n'
        "    font-weight: #{$weight};\n"
        "    font-style: #{$style};\n"
        "  }\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "scss" / "style.scss").write_text(
        '@import "mixins";\n'
        '@import "fonts";\n'
        "$accent: #336699;\n"
        "body {\n  color: $accent;\n  user-select: none;\n}\n"
        "@media (min-width: 768px) {\n  body {\n    margin: 0;\n  }\n}\n"
        ".hero {\n  background-image: url(../img/photo.jpg);\n  height: 100px;\n}\n"
        "@media (min-width: 768px) {\n  .hero {\n    height: 200px;\n  }\n}\n",
        encoding="utf-8",
    )

    (src / "js" / "_util.js").write_text(
        "function add(a, b) {\n  // sum\n  return a + b;\n}\n", encoding="utf-8"
    )
    (src / "js" / "script.js").write_text(
        "@@include('_util.js')\n\nconsole.log(add(1, 2));\n", encoding="utf-8"
    )

    make_image(src / "img" / "photo.jpg", "JPEG")
    make_image(src / "img" / "icons" / "dot.png", "PNG", "blue")

    make_ttf(src / "fonts" / "Roboto.ttf", "Roboto")
    return project_root


@pytest.fixture
def temp_font_dir(tmp_path):
    """Create a temporary directory for font testing."""
    return tmp_path / "fonts"
