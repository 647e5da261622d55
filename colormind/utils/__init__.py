"""Color space and CSS color helpers."""

from colormind.utils.color import (
    gamma_compress,
    gamma_expand,
    lms_to_rgb_error,
    rgb_to_lms,
    rgb_to_luminance,
    rgb_to_xyz,
    xyz_to_chromaticity,
    xyz_to_linear_rgb,
    xyz_to_rgb,
)
from colormind.utils.css import format_css_color, parse_css_color

__all__ = [
    "rgb_to_lms",
    "lms_to_rgb_error",
    "gamma_expand",
    "gamma_compress",
    "rgb_to_xyz",
    "xyz_to_chromaticity",
    "xyz_to_linear_rgb",
    "xyz_to_rgb",
    "rgb_to_luminance",
    "parse_css_color",
    "format_css_color",
]
