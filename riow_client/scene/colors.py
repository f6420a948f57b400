"""Hex color parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import NotAColor

_HEX_COLOR = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


@dataclass(frozen=True)
class Color:
    r: float
    g: float
    b: float


def hex_to_color(text: str) -> Color:
    """Parse ``#rrggbb`` (leading ``#`` optional) into a normalized color.

    Channels are divided by 256, not 255, so ``ff`` maps to ``255/256``. The
    render service was built against that scaling and the default scene
    colors it ships with depend on it.
    """
    if not isinstance(text, str):
        raise NotAColor(text)
    match = _HEX_COLOR.fullmatch(text)
    if match is None:
        raise NotAColor(text)
    r, g, b = (int(group, 16) / 256.0 for group in match.groups())
    return Color(r=r, g=g, b=b)


def is_color(text: str) -> bool:
    try:
        hex_to_color(text)
    except NotAColor:
        return False
    return True
