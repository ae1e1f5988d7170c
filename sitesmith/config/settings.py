"""
Build settings: encoder options, dev server and stylesheet tables.
"""

# Images
WEBP_QUALITY = 80
WEBP_SOURCE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif")
JPEG_PROGRESSIVE = True
GIF_INTERLACED = True

# Fonts
FONT_FLAVORS = ("woff", "woff2")
FONT_WEIGHT = "400"
FONT_STYLE = "normal"

# Dev server
DEV_SERVER_PORT = 3000
DEV_SERVER_HOST = "localhost"

# Output filename suffixes for minified copies
MIN_SUFFIX = ".min"

# CSS WebP class names
WEBP_CLASS = ".webp"
NO_WEBP_CLASS = ".no-webp"

# Vendor prefixes still needed by current browsers, per property
PREFIXED_PROPERTIES: dict[str, tuple[str, ...]] = {
    "appearance": ("-webkit-", "-moz-"),
    "backdrop-filter": ("-webkit-",),
    "box-decoration-break": ("-webkit-",),
    "clip-path": ("-webkit-",),
    "hyphens": ("-webkit-", "-ms-"),
    "mask": ("-webkit-",),
    "mask-image": ("-webkit-",),
    "mask-size": ("-webkit-",),
    "mask-position": ("-webkit-",),
    "mask-repeat": ("-webkit-",),
    "print-color-adjust": ("-webkit-",),
    "tab-size": ("-moz-",),
    "text-size-adjust": ("-webkit-", "-moz-", "-ms-"),
    "text-decoration-skip-ink": ("-webkit-",),
    "user-select": ("-webkit-", "-moz-", "-ms-"),
}

# Values that need a prefixed fallback: (property, value) -> value prefixes
PREFIXED_VALUES: dict[tuple[str, str], tuple[str, ...]] = {
    ("position", "sticky"): ("-webkit-",),
}

# JavaScript transpiler (babel CLI, reads source from stdin)
TRANSPILER_EXECUTABLE = "babel"
TRANSPILER_ARGS = ("--presets", "@babel/preset-env")

# SVG sprite stylesheet for "stack" mode
SPRITE_STACK_STYLE = ":root>svg{display:none}:root>svg:target{display:block}"
