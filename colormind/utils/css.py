"""
Conversion between CSS color strings and RGBA samples.

Only the forms a browser returns from computed styles, plus hex notation,
are supported: ``rgb()``, ``rgba()``, ``#rgb[a]``, ``#rrggbb[aa]`` and
``transparent``.
"""

from __future__ import annotations

import re
from typing import List

from colormind.core.config import RGBA

_FUNCTIONAL = re.compile(
    r"^rgba?\(\s*"
    r"(?P<r>[-+]?\d*\.?\d+%?)\s*[,\s]\s*"
    r"(?P<g>[-+]?\d*\.?\d+%?)\s*[,\s]\s*"
    r"(?P<b>[-+]?\d*\.?\d+%?)\s*"
    r"(?:[,/]\s*(?P<a>[-+]?\d*\.?\d+%?)\s*)?"
    r"\)$",
    re.IGNORECASE,
)
_HEX = re.compile(r"^#(?P<digits>[0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)


def _clamp_byte(value: float) -> int:
    return int(min(255, max(0, round(value))))


def _channel(token: str) -> int:
    if token.endswith("%"):
        return _clamp_byte(float(token[:-1]) * 255.0 / 100.0)
    return _clamp_byte(float(token))


def _alpha(token: str) -> int:
    if token.endswith("%"):
        return _clamp_byte(float(token[:-1]) * 255.0 / 100.0)
    return _clamp_byte(float(token) * 255.0)


def parse_css_color(text: str) -> RGBA:
    """
    Parse a CSS color string.

    CSS alpha (0-1 or a percentage) is mapped onto 0-255.

    Raises
    ------
    ValueError
        If the string is not one of the supported forms.
    """

    value = text.strip()
    if value.lower() == "transparent":
        return RGBA(0, 0, 0, 0)

    match = _FUNCTIONAL.match(value)
    if match:
        alpha = match.group("a")
        return RGBA(
            _channel(match.group("r")),
            _channel(match.group("g")),
            _channel(match.group("b")),
            _alpha(alpha) if alpha is not None else 255,
        )

    match = _HEX.match(value)
    if match:
        digits = match.group("digits")
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        channels: List[int] = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
        if len(channels) == 3:
            channels.append(255)
        return RGBA(*channels)

    raise ValueError(f"Unsupported CSS color: {text!r}")


def format_css_color(sample) -> str:
    """Render a sample as ``rgba(r, g, b, a)`` with CSS alpha in 0-1."""

    r, g, b, a = RGBA(*sample)
    return f"rgba({r}, {g}, {b}, {round(a / 255.0, 3):g})"
