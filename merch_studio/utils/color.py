"""
Color string normalisation for the studio's color overlay control.

Accepts whatever the user typed in the color field (hex, CSS names,
rgb() notation) and always produces a 6-digit hex string the color picker
input can display.
"""
from __future__ import annotations
from typing import Optional
import re

from PIL import ImageColor

DEFAULT_COLOR = "#ffffff"

_HEX_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

COLOR_MAP = {
    "red": "#ff0000", "green": "#008000", "blue": "#0000ff", "yellow": "#ffff00",
    "orange": "#ffa500", "purple": "#800080", "pink": "#ffc0cb", "black": "#000000",
    "white": "#ffffff", "gray": "#808080", "grey": "#808080", "cyan": "#00ffff",
    "magenta": "#ff00ff", "lime": "#00ff00", "navy": "#000080", "maroon": "#800000",
    "olive": "#808000", "teal": "#008080", "silver": "#c0c0c0", "gold": "#ffd700",
    "indigo": "#4b0082", "violet": "#ee82ee", "coral": "#ff7f50", "turquoise": "#40e0d0",
}


def _css_color_to_hex(color: str) -> Optional[str]:
    """Resolve a CSS color the way a browser canvas would, via Pillow."""
    try:
        rgb = ImageColor.getrgb(color)
    except ValueError:
        return None
    return "#{:02x}{:02x}{:02x}".format(*rgb[:3])


def color_to_hex(color: Optional[str]) -> str:
    if not color:
        return DEFAULT_COLOR
    trimmed = color.strip()

    if _HEX_PATTERN.match(trimmed):
        if len(trimmed) == 4:
            return "#" + "".join(ch * 2 for ch in trimmed[1:])
        return trimmed

    computed = _css_color_to_hex(trimmed)
    if computed:
        return computed

    return COLOR_MAP.get(trimmed.lower(), DEFAULT_COLOR)
