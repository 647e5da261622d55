"""
Simulation of dichromatic and achromatic vision.

Dichromats are modelled with confusion lines in CIE xy: every color is
moved along the line through its chromaticity and the deficiency's
copunctal point until it meets the line of colors the viewer can still
tell apart. The result is then pulled back into the sRGB gamut along the
direction of the neutral gray with the same luminance.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

import numpy as np

from colormind.core.config import (
    RGBA,
    ConfusionLine,
    DeficiencyKind,
    TransformConfig,
    TransformMode,
    check_amount,
    parse_kind,
)
from colormind.core.errors import ColorDivisionError, UnknownDeficiencyKindError
from colormind.deficiency.models import confusion_line_for
from colormind.utils.color import (
    NEUTRAL_X_PER_Y,
    NEUTRAL_Z_PER_Y,
    gamma_compress,
    quantize,
    rgb_to_luminance,
    rgb_to_xyz,
    xyz_to_linear_rgb,
)

logger = logging.getLogger(__name__)


def _blend(src: np.ndarray, dst: np.ndarray, amount: float) -> np.ndarray:
    return src * (1.0 - amount) + dst * amount


def _simulate_achromatope(rgb: np.ndarray, amount: float) -> np.ndarray:
    mono = rgb_to_luminance(rgb)[:, np.newaxis]
    return _blend(rgb, mono, amount)


def _simulate_dichromat(
    src: np.ndarray,
    line: ConfusionLine,
    amount: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Run the confusion-line pipeline on chromatic, non-black samples.

    Returns the blended 0-255 floats and a mask of samples whose geometry
    divided by zero (those rows hold the source values).
    """

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        logger.debug("Stage 1: sRGB -> XYZ -> xy")
        xyz = rgb_to_xyz(src / 255.0)
        big_y = xyz[:, 1]
        total = xyz.sum(axis=1)
        chroma_x = xyz[:, 0] / total
        chroma_y = big_y / total

        logger.debug("Stage 2: line through the copunctal point")
        dx = chroma_x - line.x
        slope = (chroma_y - line.y) / dx
        yint = chroma_y - chroma_x * slope

        logger.debug("Stage 3: intersect with the confusion line")
        denom = slope - line.m
        deviate_x = (line.yint - yint) / denom
        deviate_y = slope * deviate_x + yint

        logger.debug("Stage 4: simulated XYZ")
        sim_x = deviate_x * big_y / deviate_y
        sim_z = (1.0 - (deviate_x + deviate_y)) * big_y / deviate_y
        sim_xyz = np.stack([sim_x, big_y, sim_z], axis=1)

        logger.debug("Stage 5: offset to neutral gray")
        neutral_offset = np.stack(
            [NEUTRAL_X_PER_Y * big_y - sim_x, np.zeros_like(big_y), NEUTRAL_Z_PER_Y * big_y - sim_z],
            axis=1,
        )
        diff = xyz_to_linear_rgb(neutral_offset)
        linear = xyz_to_linear_rgb(sim_xyz)

        logger.debug("Stage 6-7: gamut fit")
        bound = np.where(linear < 0.0, 0.0, 1.0)
        fit = (bound - linear) / diff
        fit = np.where(np.isfinite(fit) & (fit >= 0.0) & (fit <= 1.0), fit, 0.0)
        adjust = fit.max(axis=1, keepdims=True)
        linear = linear + adjust * diff

        logger.debug("Stage 8-9: gamma compress and blend")
        encoded = gamma_compress(np.clip(linear, 0.0, 1.0)) * 255.0
        blended = _blend(src, encoded, amount)

    failed = (dx == 0.0) | (denom == 0.0) | (deviate_y == 0.0) | ~np.isfinite(blended).all(axis=1)
    blended[failed] = src[failed]
    return blended, failed


def simulate_array(
    rgb: np.ndarray,
    kind: Union[DeficiencyKind, str],
    amount: float = 1.0,
    custom_line: Optional[ConfusionLine] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Simulate a deficiency over a block of RGB samples.

    Parameters
    ----------
    rgb : np.ndarray
        Channels on the 0-255 scale, shape (N, 3)
    kind : DeficiencyKind
        Deficiency to simulate; ``CUSTOM`` requires ``custom_line``
    amount : float
        Blend between original (0) and fully simulated (1) color
    custom_line : ConfusionLine, optional
        Overrides the table lookup

    Returns
    -------
    (np.ndarray, np.ndarray)
        Integer channels in [0, 255] of shape (N, 3), and a boolean mask of
        shape (N,) marking samples that could not be simulated (they are
        returned unchanged).
    """

    rgb = np.asarray(rgb, dtype=np.float64)
    amount = check_amount(amount)
    failed = np.zeros(rgb.shape[0], dtype=bool)
    try:
        kind = parse_kind(kind)
    except UnknownDeficiencyKindError:
        if custom_line is None:
            raise
        kind = DeficiencyKind.CUSTOM

    if kind == DeficiencyKind.NORMAL or amount == 0.0:
        return quantize(rgb), failed

    if kind == DeficiencyKind.ACHROMATOPE:
        return quantize(_simulate_achromatope(rgb, amount)), failed

    line = confusion_line_for(kind, custom_line)

    # Grays (black included) are seen correctly by every dichromat
    chromatic = ~((rgb[:, 0] == rgb[:, 1]) & (rgb[:, 1] == rgb[:, 2]))
    out = rgb.copy()
    if chromatic.any():
        blended, bad = _simulate_dichromat(rgb[chromatic], line, amount)
        out[chromatic] = blended
        failed[np.flatnonzero(chromatic)[bad]] = True

    return quantize(out), failed


def simulate(sample, config: TransformConfig) -> RGBA:
    """
    Simulate how a single RGBA sample appears to a CVD viewer.

    Raises
    ------
    InvalidAmountError
        If ``config.amount`` is not a finite number in [0, 1].
    UnknownDeficiencyKindError
        If ``config`` selects ``CUSTOM`` without a confusion line.
    ColorDivisionError
        If the sample's chromaticity sits on a vertical line through the
        copunctal point, or its line runs parallel to the confusion line.
    """

    config.validate(TransformMode.SIMULATE)
    sample = RGBA(*sample)
    out, failed = simulate_array(
        np.array([sample[:3]], dtype=np.float64),
        config.kind,
        float(config.amount),
        config.custom_line,
    )
    if failed[0]:
        raise ColorDivisionError(
            f"Cannot simulate {config.kind.value} for {tuple(sample)}: degenerate confusion line"
        )
    r, g, b = out[0]
    return RGBA(int(r), int(g), int(b), sample.a)
