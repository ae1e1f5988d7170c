"""
Include directive resolution for HTML and JavaScript sources.

Directive syntax:

    @@include('partials/header.html')
    @@include("partials/card.html", {"title": "Hello"})

Paths are relative to the including file. Inside the included file, ``@@name``
markers are replaced by values from the JSON context.
"""

import json
from pathlib import Path

from sitesmith.core.errors import IncludeError

PREFIX = "@@"
DIRECTIVE = PREFIX + "include("

_decoder = json.JSONDecoder()


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def parse_directive(text: str, start: int, source: Path) -> tuple[str, dict, int]:
    """
    Parse one include directive.

    Args:
        text: Text containing the directive
        start: Index of the directive prefix
        source: File being processed, for error messages

    Returns:
        (target path, context, index just past the closing parenthesis)
    """
    pos = _skip_whitespace(text, start + len(DIRECTIVE))
    if pos >= len(text) or text[pos] not in "'\"":
        raise IncludeError(f"{source}: malformed include directive at offset {start}")

    quote = text[pos]
    end = text.find(quote, pos + 1)
    if end == -1:
        raise IncludeError(f"{source}: unterminated include path at offset {start}")
    target = text[pos + 1 : end]

    pos = _skip_whitespace(text, end + 1)
    context: dict = {}
    if pos < len(text) and text[pos] == ",":
        pos = _skip_whitespace(text, pos + 1)
        try:
            context, pos = _decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise IncludeError(f"{source}: invalid include context for {target}: {e}") from e
        if not isinstance(context, dict):
            raise IncludeError(f"{source}: include context for {target} must be an object")
        pos = _skip_whitespace(text, pos)

    if pos >= len(text) or text[pos] != ")":
        raise IncludeError(f"{source}: missing ')' after include of {target}")
    return target, context, pos + 1


def substitute_variables(text: str, context: dict) -> str:
    """Replace ``@@name`` markers with context values, longest names first."""
    for name in sorted(context, key=len, reverse=True):
        value = context[name]
        if not isinstance(value, str):
            value = json.dumps(value)
        text = text.replace(PREFIX + name, value)
    return text


def resolve_includes(
    text: str,
    source: Path,
    context: dict | None = None,
    _stack: tuple[Path, ...] = (),
) -> str:
    """
    Resolve all include directives in text.

    Args:
        text: Source text
        source: Path of the file the text was read from
        context: Variables available to ``@@name`` markers in this text

    Returns:
        Text with every directive replaced by the included file's contents

    Raises:
        IncludeError: If a target is missing, unreadable, or includes itself
    """
    source = source.resolve()
    stack = _stack + (source,)

    if context:
        text = substitute_variables(text, context)

    parts: list[str] = []
    pos = 0
    while True:
        start = text.find(DIRECTIVE, pos)
        if start == -1:
            parts.append(text[pos:])
            break
        parts.append(text[pos:start])

        target, child_context, pos = parse_directive(text, start, source)
        target_path = (source.parent / target).resolve()
        if target_path in stack:
            chain = " -> ".join(p.name for p in (*stack, target_path))
            raise IncludeError(f"{source}: circular include ({chain})")
        try:
            included = target_path.read_text(encoding="utf-8")
        except OSError as e:
            raise IncludeError(f"{source}: cannot include {target}: {e.strerror}") from e

        merged = {**(context or {}), **child_context}
        parts.append(resolve_includes(included, target_path, merged, stack))

    return "".join(parts)


def resolve_file(path: Path) -> str:
    """Read a file and resolve its include directives."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IncludeError(f"Cannot read {path}: {e.strerror}") from e
    return resolve_includes(text, path)
