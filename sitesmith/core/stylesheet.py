"""
Post-processing for compiled stylesheets.

Works on the expanded output of libsass: a flat sequence of rules and
at-rules, one declaration per line. Three transforms run after compilation:

  - group_media_queries: merge identical @media blocks and move them last
  - add_webp_rules: split raster backgrounds into .webp/.no-webp variants
  - autoprefix: add vendor-prefixed declarations from a fixed table
"""

import re
from dataclasses import dataclass

from sitesmith.config.settings import (
    NO_WEBP_CLASS,
    PREFIXED_PROPERTIES,
    PREFIXED_VALUES,
    WEBP_CLASS,
)

_PAIRS = {"(": ")", "[": "]"}
_WIDTH_RE = re.compile(r"(min|max)-width\s*:\s*([\d.]+)\s*(px|em|rem)?", re.IGNORECASE)
_DECL_LINE_RE = re.compile(r"^(\s*)(-?[a-zA-Z][a-zA-Z-]*)(\s*:\s*)(.*?);\s*$")
_RASTER_URL_RE = re.compile(
    r"""(url\(\s*['"]?[^'")]*?)\.(?:jpe?g|png)((?:[?#][^'")]*)?['"]?\s*\))""",
    re.IGNORECASE,
)
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_ROOT_SELECTOR_RE = re.compile(r"^(html|:root)(?![\w-])")
_BLOCK_AT_RULES = ("@media", "@supports")


@dataclass
class Node:
    """
    One top-level item of a stylesheet.

    ``body`` is None for comments and block-less statements (``@import``).
    ``indent`` is the whitespace preceding the node on its first line.
    """

    prelude: str
    body: str | None
    raw: str
    indent: str = ""

    @property
    def is_media(self) -> bool:
        return self.body is not None and self.prelude.lower().startswith("@media")


def _skip_string(text: str, pos: int) -> int:
    """Index just past the string literal starting at pos."""
    quote = text[pos]
    pos += 1
    while pos < len(text):
        if text[pos] == "\\":
            pos += 2
            continue
        if text[pos] == quote:
            return pos + 1
        pos += 1
    return pos


def _skip_comment(text: str, pos: int) -> int:
    end = text.find("*/", pos + 2)
    return len(text) if end == -1 else end + 2


def _block_end(text: str, open_pos: int) -> int:
    """Index of the brace closing the block opened at open_pos."""
    depth = 0
    pos = open_pos
    while pos < len(text):
        char = text[pos]
        if char in "'\"":
            pos = _skip_string(text, pos)
            continue
        if text.startswith("/*", pos):
            pos = _skip_comment(text, pos)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    raise ValueError(f"Unbalanced braces in stylesheet at offset {open_pos}")


def parse_nodes(css: str) -> list[Node]:
    """Split a stylesheet (or block body) into its top-level nodes."""
    nodes: list[Node] = []
    pos = 0
    length = len(css)
    while pos < length:
        line_start = css.rfind("\n", 0, pos) + 1
        while pos < length and css[pos].isspace():
            if css[pos] == "\n":
                line_start = pos + 1
            pos += 1
        if pos >= length:
            break
        indent = css[line_start:pos] if css[line_start:pos].isspace() else ""

        start = pos
        if css.startswith("/*", pos):
            pos = _skip_comment(css, pos)
            nodes.append(Node("", None, css[start:pos], indent))
            continue

        while pos < length:
            char = css[pos]
            if char in "'\"":
                pos = _skip_string(css, pos)
                continue
            if css.startswith("/*", pos):
                pos = _skip_comment(css, pos)
                continue
            if char in ";{}":
                break
            pos += 1

        if pos >= length or css[pos] == "}":
            # Trailing text with no terminator
            text = css[start:pos].strip()
            if text:
                nodes.append(Node(text, None, text, indent))
            pos += 1
            continue

        if css[pos] == ";":
            pos += 1
            nodes.append(Node(css[start:pos].strip(), None, css[start:pos], indent))
            continue

        end = _block_end(css, pos)
        nodes.append(
            Node(css[start:pos].strip(), css[pos + 1 : end], css[start : end + 1], indent)
        )
        pos = end + 1
    return nodes


def split_top_level(text: str, separator: str) -> list[str]:
    """Split on a separator that is not nested in parentheses, brackets or strings."""
    parts: list[str] = []
    stack: list[str] = []
    start = 0
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char in "'\"":
            pos = _skip_string(text, pos)
            continue
        if char in _PAIRS:
            stack.append(_PAIRS[char])
        elif stack and char == stack[-1]:
            stack.pop()
        elif char == separator and not stack:
            parts.append(text[start:pos])
            start = pos + 1
        pos += 1
    parts.append(text[start:])
    return parts


def _join_nodes(chunks: list[str]) -> str:
    return "\n\n".join(chunks) + "\n"


# Media query grouping


def _normalize_query(prelude: str) -> str:
    return " ".join(prelude.split())


def media_sort_key(query: str) -> tuple[int, float]:
    """
    Sort key placing width-less queries first, then min-width ascending,
    then max-width descending.
    """
    match = _WIDTH_RE.search(query)
    if not match:
        return (0, 0.0)
    kind, value, unit = match.groups()
    size = float(value)
    if unit and unit.lower() in ("em", "rem"):
        size *= 16
    if kind.lower() == "min":
        return (1, size)
    return (2, -size)


def group_media_queries(css: str) -> str:
    """
    Merge top-level @media blocks with identical queries and move them to the
    end of the stylesheet.
    """
    nodes = parse_nodes(css)
    if not any(node.is_media for node in nodes):
        return css

    others: list[str] = []
    groups: dict[str, list[str]] = {}
    for node in nodes:
        if node.is_media:
            body = node.body.strip("\n").rstrip()
            if body.strip():
                groups.setdefault(_normalize_query(node.prelude), []).append(body)
        else:
            others.append(node.raw.strip())

    ordered = sorted(groups, key=media_sort_key)
    media = [f"{query} {{\n" + "\n\n".join(groups[query]) + "\n}" for query in ordered]
    return _join_nodes(others + media)


# Vendor prefixes


def _cascade(indent: str, prefixes: tuple[str, ...], prop: str, sep: str, value: str) -> list[str]:
    width = max(len(p) for p in prefixes)
    lines = [
        f"{indent}{' ' * (width - len(prefix))}{prefix}{prop}{sep}{value};"
        for prefix in prefixes
    ]
    lines.append(f"{indent}{' ' * width}{prop}{sep}{value};")
    return lines


def autoprefix(css: str, cascade: bool = True) -> str:
    """
    Add vendor-prefixed declarations ahead of unprefixed ones.

    Declarations already preceded by a prefixed form in the same block keep
    their existing prefixes.
    """
    output: list[str] = []
    seen_prefixed: set[str] = set()

    for line in css.split("\n"):
        if "{" in line or "}" in line:
            seen_prefixed.clear()
            output.append(line)
            continue

        match = _DECL_LINE_RE.match(line)
        if not match:
            output.append(line)
            continue

        indent, prop, sep, value = match.groups()
        lowered = prop.lower()
        if lowered.startswith("-"):
            seen_prefixed.add(lowered)
            output.append(line)
            continue

        prefixes = tuple(
            p for p in PREFIXED_PROPERTIES.get(lowered, ()) if p + lowered not in seen_prefixed
        )
        value_prefixes = PREFIXED_VALUES.get((lowered, value.strip().lower()), ())

        if prefixes:
            if cascade:
                output.extend(_cascade(indent, prefixes, prop, sep, value))
            else:
                output.extend(f"{indent}{p}{prop}{sep}{value};" for p in prefixes)
                output.append(line)
        elif value_prefixes:
            output.extend(f"{indent}{prop}{sep}{p}{value.strip()};" for p in value_prefixes)
            output.append(line)
        else:
            output.append(line)

    return "\n".join(output)


# WebP background variants


def prefix_selector(selector: str, class_name: str) -> str:
    """Scope every selector in a selector list under a class on the root element."""
    scoped = []
    for part in split_top_level(selector, ","):
        part = part.strip()
        if not part:
            continue
        match = _ROOT_SELECTOR_RE.match(part)
        if match:
            scoped.append(match.group(1) + class_name + part[match.end():])
        else:
            scoped.append(f"{class_name} {part}")
    return ", ".join(scoped)


def format_rule(selector: str, declarations: list[str], indent: str = "") -> str:
    lines = [f"{selector} {{"]
    lines.extend(f"{indent}  {decl};" for decl in declarations)
    lines.append(f"{indent}}}")
    return "\n".join(lines)


def _is_raster_background(declaration: str) -> bool:
    name = declaration.split(":", 1)[0].strip().lower()
    return name in ("background", "background-image") and bool(
        _RASTER_URL_RE.search(declaration)
    )


def _webp_rules(node: Node) -> list[str]:
    body = _COMMENT_RE.sub("", node.body)
    declarations = [d.strip() for d in split_top_level(body, ";") if d.strip()]
    raster = [d for d in declarations if _is_raster_background(d)]
    if not raster:
        return [node.raw]

    indent = node.indent
    kept = [d for d in declarations if d not in raster]
    webp = [_RASTER_URL_RE.sub(r"\1.webp\2", d) for d in raster]

    rules = []
    if kept:
        rules.append(format_rule(node.prelude, kept, indent))
    rules.append(format_rule(prefix_selector(node.prelude, NO_WEBP_CLASS), raster, indent))
    rules.append(format_rule(prefix_selector(node.prelude, WEBP_CLASS), webp, indent))
    return rules


def _transform_block(node: Node) -> str:
    if node.body is None:
        return node.raw
    if node.prelude.lower().startswith(_BLOCK_AT_RULES):
        children = parse_nodes(node.body)
        if not children:
            return node.raw
        chunks = []
        for child in children:
            rendered = _transform_block(child)
            chunks.append(child.indent + rendered)
        return f"{node.prelude} {{\n" + "\n\n".join(chunks) + f"\n{node.indent}}}"
    if node.prelude.startswith("@"):
        return node.raw
    return "\n\n".join(
        rule if i == 0 else node.indent + rule
        for i, rule in enumerate(_webp_rules(node))
    )


def add_webp_rules(css: str) -> str:
    """
    Move raster ``background`` declarations to ``.no-webp`` scoped rules and
    add ``.webp`` scoped rules pointing at the WebP variant.
    """
    if not _RASTER_URL_RE.search(css):
        return css
    return _join_nodes([_transform_block(node) for node in parse_nodes(css)])
