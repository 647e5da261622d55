"""
Tests for CSS color parsing and formatting.
"""

from __future__ import annotations

import pytest

from colormind import RGBA
from colormind.utils.css import format_css_color, parse_css_color


@pytest.mark.parametrize(
    "text, expected",
    [
        ("rgb(255, 0, 0)", RGBA(255, 0, 0, 255)),
        ("rgba(10,20,30,0.5)", RGBA(10, 20, 30, 128)),
        ("RGBA(1, 2, 3, 0)", RGBA(1, 2, 3, 0)),
        ("rgb(1 2 3 / 100%)", RGBA(1, 2, 3, 255)),
        ("rgb(100%, 0%, 50%)", RGBA(255, 0, 128, 255)),
        ("transparent", RGBA(0, 0, 0, 0)),
        ("#f00", RGBA(255, 0, 0, 255)),
        ("#00ff0080", RGBA(0, 255, 0, 128)),
        ("  #102030  ", RGBA(16, 32, 48, 255)),
    ],
)
def test_parse_css_color(text: str, expected: RGBA) -> None:
    assert parse_css_color(text) == expected


@pytest.mark.parametrize("text", ["red", "#12345", "rgb(1, 2)", "hsl(0, 100%, 50%)"])
def test_unsupported_colors_raise(text: str) -> None:
    with pytest.raises(ValueError):
        parse_css_color(text)


def test_format_css_color() -> None:
    assert format_css_color(RGBA(1, 2, 3, 255)) == "rgba(1, 2, 3, 1)"
    assert format_css_color((1, 2, 3, 0)) == "rgba(1, 2, 3, 0)"
    assert format_css_color(RGBA(1, 2, 3, 128)) == "rgba(1, 2, 3, 0.502)"
