"""
Wrap raster ``<img>`` tags in ``<picture>`` elements offering a WebP source.
"""

import re

from sitesmith.config.settings import WEBP_SOURCE_EXTENSIONS

_TOKEN_RE = re.compile(r"<picture\b|</picture\s*>|<img\b[^>]*>", re.IGNORECASE)
_SRC_RE = re.compile(r"""\bsrc\s*=\s*(["'])(.*?)\1""", re.IGNORECASE | re.DOTALL)


def webp_path(src: str) -> str | None:
    """
    WebP counterpart of an image URL, or None if the URL is not a raster image.

    Query strings and fragments are kept after the new extension.
    """
    cut = len(src)
    for marker in "?#":
        index = src.find(marker)
        if index != -1:
            cut = min(cut, index)
    path, tail = src[:cut], src[cut:]
    lowered = path.lower()
    for ext in WEBP_SOURCE_EXTENSIONS:
        if lowered.endswith(ext):
            return path[: -len(ext)] + ".webp" + tail
    return None


def picture_markup(img_tag: str, src: str) -> str:
    """Build the ``<picture>`` replacement for one ``<img>`` tag."""
    return (
        f'<picture><source srcset="{src}" type="image/webp">'
        f"{img_tag}</picture>"
    )


def add_webp_pictures(html: str) -> str:
    """
    Rewrite ``<img>`` tags to prefer WebP.

    Tags already inside a ``<picture>`` element and non-raster sources are left
    untouched.
    """
    parts: list[str] = []
    pos = 0
    depth = 0
    for match in _TOKEN_RE.finditer(html):
        token = match.group(0)
        lowered = token.lower()
        if lowered.startswith("<picture"):
            depth += 1
            continue
        if lowered.startswith("</picture"):
            depth = max(depth - 1, 0)
            continue
        if depth:
            continue

        src_match = _SRC_RE.search(token)
        if not src_match:
            continue
        webp = webp_path(src_match.group(2))
        if webp is None:
            continue

        parts.append(html[pos : match.start()])
        parts.append(picture_markup(token, webp))
        pos = match.end()

    parts.append(html[pos:])
    return "".join(parts)
