"""Tests for include directive resolution."""

import pytest

from sitesmith.core.errors import IncludeError
from sitesmith.core.includes import resolve_file, resolve_includes, substitute_variables


def test_simple_include(tmp_path):
    """Test a directive is replaced by the file contents."""
    (tmp_path / "_nav.html").write_text("<nav></nav>", encoding="utf-8")
    page = tmp_path / "index.html"
    page.write_text("<body>@@include('_nav.html')</body>", encoding="utf-8")

    assert resolve_file(page) == "<body><nav></nav></body>"


def test_nested_include_relative_to_including_file(tmp_path):
    """Test nested includes resolve against their own directory."""
    parts = tmp_path / "parts"
    parts.mkdir()
    (parts / "outer.html").write_text('[@@include("inner.html")]', encoding="utf-8")
    (parts / "inner.html").write_text("inner", encoding="utf-8")
    page = tmp_path / "page.html"
    page.write_text("@@include('parts/outer.html')", encoding="utf-8")

    assert resolve_file(page) == "[inner]"


def test_include_context_variables(tmp_path):
    """Test JSON context is substituted into the included file."""
    (tmp_path / "_card.html").write_text("<h2>@@title</h2><p>@@titleSub</p>", encoding="utf-8")
    page = tmp_path / "page.html"
    page.write_text(
        '@@include("_card.html", {"title": "A", "titleSub": "B"})', encoding="utf-8"
    )

    assert resolve_file(page) == "<h2>A</h2><p>B</p>"


def test_context_is_inherited_by_nested_includes(tmp_path):
    """Test variables pass down to includes of includes."""
    (tmp_path / "_a.html").write_text("@@include('_b.html')", encoding="utf-8")
    (tmp_path / "_b.html").write_text("@@name", encoding="utf-8")
    page = tmp_path / "page.html"
    page.write_text('@@include("_a.html", {"name": "deep"})', encoding="utf-8")

    assert resolve_file(page) == "deep"


def test_missing_include_names_both_files(tmp_path):
    """Test a missing target fails with the including file and target named."""
    page = tmp_path / "page.html"
    page.write_text("@@include('_missing.html')", encoding="utf-8")

    with pytest.raises(IncludeError, match=r"page\.html.*_missing\.html"):
        resolve_file(page)


def test_circular_include(tmp_path):
    """Test a file including itself is rejected."""
    page = tmp_path / "loop.html"
    page.write_text("@@include('loop.html')", encoding="utf-8")

    with pytest.raises(IncludeError, match="circular"):
        resolve_file(page)


def test_malformed_directive(tmp_path):
    """Test a directive without a quoted path is rejected."""
    with pytest.raises(IncludeError, match="malformed"):
        resolve_includes("@@include(nav.html)", tmp_path / "page.html")


def test_unknown_variables_are_left_alone():
    """Test markers without a context value stay in place."""
    assert substitute_variables("@@a @@b", {"a": "1"}) == "1 @@b"


def test_non_string_values_are_json_encoded():
    assert substitute_variables("@@n/@@flag", {"n": 3, "flag": True}) == "3/true"
