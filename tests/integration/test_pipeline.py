"""Tests for the composite build, clean, watch wiring and CLI."""

import pytest
from click.testing import CliRunner

from sitesmith.cli.main import cli
from sitesmith.config.paths import ProjectPaths
from sitesmith.operations.fonts import font_include
from sitesmith.pipeline import watch as watch_module
from sitesmith.pipeline.runner import build, clean_task, css, js
from sitesmith.pipeline.watch import create_server, rebuild_callback, watch_targets


@pytest.fixture
def project(sample_project):
    return ProjectPaths.from_root(sample_project)


@pytest.fixture(autouse=True)
def no_babel(monkeypatch):
    monkeypatch.setattr("sitesmith.operations.js.find_transpiler", lambda root: None)


def _tree(root):
    return {
        str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
    }


def test_build_produces_every_asset_class(project):
    build(project)

    assert (project.dist / "index.html").exists()
    assert (project.build.css / "style.min.css").exists()
    assert (project.build.js / "script.min.js").exists()
    assert (project.build.img / "photo.webp").exists()
    assert (project.build.fonts / "Roboto.woff2").exists()


def test_build_writes_manifest_after_fonts(project):
    """Test fontsStyle sees the converted fonts."""
    build(project)
    assert project.fonts_manifest.read_bytes().decode("utf-8") == font_include("Roboto")


def test_build_twice_same_tree(project):
    project.fonts_manifest.write_text("// fonts\n", encoding="utf-8")
    build(project)
    first = _tree(project.dist)
    build(project)
    assert _tree(project.dist) == first


def test_build_twice_from_empty_manifest(project):
    """Test the first build already compiles the generated font manifest."""
    build(project)
    first = _tree(project.dist)
    assert b"@font-face" in first["css/style.css"]

    build(project)
    assert _tree(project.dist) == first


def test_clean_after_build(project):
    build(project)
    clean_task(project)
    assert not project.dist.exists()


def test_clean_without_build_folder(project):
    clean_task(project)
    assert not project.dist.exists()


def test_watch_targets_map_to_tasks(project):
    names = {target.directory.name: task.name for target, task in watch_targets(project)}
    assert names == {"src": "html", "scss": "css", "js": "js", "img": "images"}


def test_rebuild_callback_survives_failure(project, caplog):
    """Test a failing rebuild is logged and does not propagate."""
    (project.src / "js" / "script.js").write_text("@@include('_gone.js')", encoding="utf-8")

    rebuild_callback(js, project)()
    assert "js failed" in caplog.text


def test_rebuild_callback_runs_task(project):
    rebuild_callback(css, project)()
    assert (project.build.css / "style.css").exists()


def test_create_server_registers_watches(project, monkeypatch):
    registered = []

    class FakeServer:
        def watch(self, path, func=None, delay=None, ignore=None):
            registered.append((path, ignore))

    monkeypatch.setattr(watch_module, "Server", FakeServer)
    create_server(project)

    assert [path for path, _ in registered] == [
        str(project.src),
        str(project.src / "scss"),
        str(project.src / "js"),
        str(project.src / "img"),
    ]
    scss_ignore = registered[1][1]
    assert scss_ignore("style.css")
    assert not scss_ignore("style.scss")


def test_cli_build_and_clean(project):
    runner = CliRunner()

    result = runner.invoke(cli, ["--root", str(project.root), "build"])
    assert result.exit_code == 0, result.output
    assert (project.dist / "index.html").exists()

    result = runner.invoke(cli, ["--root", str(project.root), "clean"])
    assert result.exit_code == 0
    assert not project.dist.exists()


def test_cli_failure_exit_code(project):
    (project.src / "index.html").write_text("@@include('_gone.html')", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--root", str(project.root), "html"])
    assert result.exit_code == 1


def test_cli_rejects_unsafe_root(tmp_path):
    root = tmp_path / "src"
    root.mkdir()
    result = CliRunner().invoke(cli, ["--root", str(root), "clean"])
    assert result.exit_code == 1
    assert root.exists()


def test_cli_camel_case_aliases(project):
    runner = CliRunner()
    result = runner.invoke(cli, ["--root", str(project.root), "fontsStyle", "--force"])
    assert result.exit_code == 0
    assert project.fonts_manifest.read_bytes() == b""

    result = runner.invoke(cli, ["--root", str(project.root), "svgSprite"])
    assert result.exit_code == 0


def test_cli_default_is_watch(project, monkeypatch):
    calls = []
    monkeypatch.setattr(watch_module, "watch", lambda paths, port: calls.append(port))

    result = CliRunner().invoke(cli, ["--root", str(project.root)])

    assert result.exit_code == 0
    assert calls == [3000]


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output
