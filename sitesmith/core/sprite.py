"""
SVG "stack" sprite packing.

Each icon becomes a nested ``<svg id="<name>">`` inside one root document.
A small stylesheet hides every icon except the one addressed by the URL
fragment, so ``icons.svg#arrow`` renders only the arrow.
"""

import re
import xml.etree.ElementTree as ET
from pathlib import Path

from sitesmith.config.settings import SPRITE_STACK_STYLE

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

# Root attributes copied as-is onto each nested icon; viewBox is derived
CARRIED_ATTRIBUTES = ("preserveAspectRatio", "fill", "stroke")
HREF_ATTRIBUTES = ("href", f"{{{XLINK_NS}}}href")

_URL_REF_RE = re.compile(r"""url\(\s*(['"]?)#([^'")\s]+)\1\s*\)""")


def _strip_units(value: str) -> str:
    return value.strip().removesuffix("px")


def view_box(root: ET.Element) -> str | None:
    """viewBox of an icon, derived from width/height when missing."""
    box = root.get("viewBox")
    if box:
        return box
    width, height = root.get("width"), root.get("height")
    if width and height:
        return f"0 0 {_strip_units(width)} {_strip_units(height)}"
    return None


def namespace_ids(icon: ET.Element, prefix: str) -> None:
    """
    Prefix the ids inside an icon so they stay unique across the sprite.

    References to renamed ids in ``url(#id)`` values, ``<style>`` text and
    ``href`` attributes are rewritten to match. The icon's own id is kept.
    """
    descendants = [el for el in icon.iter() if el is not icon]
    renamed = {}
    for el in descendants:
        old = el.get("id")
        if old:
            renamed[old] = f"{prefix}_{old}"
            el.set("id", renamed[old])
    if not renamed:
        return

    def rewrite_url(match: re.Match) -> str:
        quote, target = match.groups()
        return f"url({quote}#{renamed.get(target, target)}{quote})"

    for el in descendants:
        for name, value in list(el.attrib.items()):
            if name in HREF_ATTRIBUTES and value.startswith("#"):
                el.set(name, "#" + renamed.get(value[1:], value[1:]))
            elif "url(" in value:
                el.set(name, _URL_REF_RE.sub(rewrite_url, value))
        if el.tag == f"{{{SVG_NS}}}style" and el.text:
            el.text = _URL_REF_RE.sub(rewrite_url, el.text)


def icon_element(path: Path) -> ET.Element:
    """
    Parse one icon file into a nested ``<svg>`` element.

    Raises:
        ET.ParseError: If the file is not well-formed XML
    """
    root = ET.parse(path).getroot()
    icon = ET.Element(f"{{{SVG_NS}}}svg", {"id": path.stem})

    box = view_box(root)
    if box:
        icon.set("viewBox", box)
    for name in CARRIED_ATTRIBUTES:
        if root.get(name) is not None:
            icon.set(name, root.get(name))

    for child in root:
        icon.append(child)
    namespace_ids(icon, path.stem)
    return icon


def build_stack_sprite(icons: list[Path]) -> bytes:
    """
    Pack SVG files into one stack sprite.

    Args:
        icons: Icon files; each file's stem becomes its fragment identifier

    Returns:
        Serialized sprite document
    """
    sprite = ET.Element(f"{{{SVG_NS}}}svg")
    style = ET.SubElement(sprite, f"{{{SVG_NS}}}style")
    style.text = SPRITE_STACK_STYLE

    for path in icons:
        sprite.append(icon_element(path))

    return ET.tostring(sprite, encoding="utf-8", xml_declaration=True)
