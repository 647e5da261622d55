"""
Color space transformations used by the simulation and daltonization paths.

All functions accept array-likes whose last axis holds three channels
(a single triple works too) and return ``np.ndarray``.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from colormind.core.errors import ColorDivisionError

GAMMA = 2.2


def _frozen(rows) -> np.ndarray:
    mat = np.array(rows, dtype=np.float64)
    mat.setflags(write=False)
    return mat


# RGB to LMS (cone response)
RGB_TO_LMS = _frozen(
    [
        [17.8824, 43.5161, 4.11935],
        [3.45565, 27.1554, 3.86714],
        [0.0299566, 0.184309, 1.46709],
    ]
)

# LMS back to RGB, used to isolate the error a dichromat cannot see
LMS_TO_RGB_ERROR = _frozen(
    [
        [0.0809444479, -0.130504409, 0.116721066],
        [-0.0102485335, 0.0540193266, -0.113614708],
        [-0.000365296938, -0.00412161469, 0.693511405],
    ]
)

# sRGB to XYZ (D65)
SRGB_TO_XYZ = _frozen(
    [
        [0.412424, 0.357579, 0.180464],
        [0.212656, 0.715158, 0.0721856],
        [0.0193324, 0.119193, 0.950444],
    ]
)

# XYZ to sRGB (D65)
XYZ_TO_SRGB = _frozen(
    [
        [3.24071, -1.53726, -0.498571],
        [-0.969258, 1.87599, 0.0415557],
        [0.0556352, -0.203996, 1.05707],
    ]
)

# Monochrome weights applied to raw channels
LUMINANCE_WEIGHTS = _frozen([0.212656, 0.715158, 0.072186])

# D65 neutral point in xy, expressed as X/Y and Z/Y ratios
NEUTRAL_X_PER_Y = 0.312713 / 0.329016
NEUTRAL_Z_PER_Y = 0.358271 / 0.329016

# Float noise absorbed before truncating to integer channels
QUANTIZE_TOLERANCE = 1e-9


def _as_triples(values) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape[-1:] != (3,):
        raise ValueError(f"Expected trailing axis of 3 channels, got shape {arr.shape}")
    return arr


def rgb_to_lms(rgb) -> np.ndarray:
    """Convert RGB (any consistent scale) to LMS cone responses."""

    return np.dot(_as_triples(rgb), RGB_TO_LMS.T)


def lms_to_rgb_error(lms) -> np.ndarray:
    """Convert dichromat LMS back to RGB for error isolation."""

    return np.dot(_as_triples(lms), LMS_TO_RGB_ERROR.T)


def gamma_expand(values) -> np.ndarray:
    """Decode gamma-encoded channels in [0, 1] to linear light."""

    return np.power(np.clip(np.asarray(values, dtype=np.float64), 0.0, None), GAMMA)


def gamma_compress(values) -> np.ndarray:
    """
    Encode linear channels with a 1/2.2 gamma.

    Negative values are clipped to 0 first; their fractional power is not
    a real number.
    """

    return np.power(np.clip(np.asarray(values, dtype=np.float64), 0.0, None), 1.0 / GAMMA)


def rgb_to_xyz(rgb) -> np.ndarray:
    """
    Convert gamma-encoded sRGB to XYZ.

    Parameters
    ----------
    rgb : array-like
        sRGB channels normalised to [0, 1], shape (..., 3)
    """

    return np.dot(gamma_expand(_as_triples(rgb)), SRGB_TO_XYZ.T)


def xyz_to_chromaticity(xyz) -> Tuple[np.ndarray, np.ndarray]:
    """
    Project XYZ onto xy chromaticity coordinates.

    Raises
    ------
    ColorDivisionError
        If any sample has ``X + Y + Z == 0`` (pure black).
    """

    xyz = _as_triples(xyz)
    total = xyz.sum(axis=-1)
    if np.any(total == 0.0):
        raise ColorDivisionError("Chromaticity of pure black is undefined (X + Y + Z == 0)")
    return xyz[..., 0] / total, xyz[..., 1] / total


def xyz_to_linear_rgb(xyz) -> np.ndarray:
    """Convert XYZ to linear sRGB."""

    return np.dot(_as_triples(xyz), XYZ_TO_SRGB.T)


def xyz_to_rgb(xyz) -> np.ndarray:
    """Convert XYZ to gamma-encoded sRGB in [0, 1] (out-of-gamut negatives clip to 0)."""

    return gamma_compress(xyz_to_linear_rgb(xyz))


def rgb_to_luminance(rgb) -> np.ndarray:
    """Weighted sum of raw (non-linearised) channels."""

    return np.dot(_as_triples(rgb), LUMINANCE_WEIGHTS)


def quantize(values) -> np.ndarray:
    """
    Clamp 0-255 floats and truncate toward zero, returning integer channels.

    Values within ``QUANTIZE_TOLERANCE`` below an integer count as that
    integer, so rounding noise (luminance weights summing to just under 1,
    a gamut fit landing on 0.9999999999999999) does not drop a level.
    """

    clipped = np.clip(np.asarray(values, dtype=np.float64), 0.0, 255.0)
    return np.floor(clipped + QUANTIZE_TOLERANCE).astype(np.int64)
