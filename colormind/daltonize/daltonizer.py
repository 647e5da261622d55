"""
Daltonization: push the color information a dichromat cannot see into
channels they still perceive.

The sample is projected into LMS, the missing cone response is rebuilt from
the remaining two, and the difference between the original and that
simulated color (the "error") is redistributed into green and blue.
"""

from __future__ import annotations

import logging
from typing import Union

import numpy as np

from colormind.core.config import (
    RGBA,
    DeficiencyKind,
    TransformConfig,
    TransformMode,
    check_amount,
    parse_kind,
)
from colormind.deficiency.models import matrix_for
from colormind.utils.color import LMS_TO_RGB_ERROR, RGB_TO_LMS, quantize

logger = logging.getLogger(__name__)

# Error redistribution: red error is spread over green and blue, nothing
# is added back to red.
ERROR_SHIFT = np.array(
    [
        [0.0, 0.0, 0.0],
        [0.7, 1.0, 0.0],
        [0.7, 0.0, 1.0],
    ]
)
ERROR_SHIFT.setflags(write=False)


def daltonize_array(
    rgb: np.ndarray,
    kind: Union[DeficiencyKind, str],
    amount: float = 1.0,
) -> np.ndarray:
    """
    Daltonize a block of RGB samples.

    Parameters
    ----------
    rgb : np.ndarray
        Channels on the 0-255 scale, shape (N, 3)
    kind : DeficiencyKind
        Protanope, Deuteranope, Tritanope or Normal (identity)
    amount : float
        Blend between original (0) and fully daltonized (1) color

    Returns
    -------
    np.ndarray
        Integer channels in [0, 255], shape (N, 3)
    """

    rgb = np.asarray(rgb, dtype=np.float64)
    amount = check_amount(amount)
    kind = parse_kind(kind)
    if kind == DeficiencyKind.NORMAL or amount == 0.0:
        return quantize(rgb)

    cvd = matrix_for(kind)
    chromatic = ~((rgb[:, 0] == rgb[:, 1]) & (rgb[:, 1] == rgb[:, 2]))
    out = rgb.copy()
    if not chromatic.any():
        return quantize(out)

    logger.debug("Daltonizing %d chromatic samples (%s)", int(chromatic.sum()), kind.value)
    src = rgb[chromatic]
    lms = np.dot(src, RGB_TO_LMS.T)
    lms_cvd = np.dot(lms, cvd.T)
    seen = np.dot(lms_cvd, LMS_TO_RGB_ERROR.T)
    error = src - seen
    corrected = np.clip(src + np.dot(error, ERROR_SHIFT.T), 0.0, 255.0)

    if amount != 1.0:
        corrected = src * (1.0 - amount) + corrected * amount

    out[chromatic] = corrected
    return quantize(out)


def daltonize(sample, config: TransformConfig) -> RGBA:
    """
    Daltonize a single RGBA sample.

    ``config.amount`` is ignored unless ``config.blend_daltonize`` is set;
    daltonization is otherwise always applied at full strength. The amount
    is range-checked either way.

    Raises
    ------
    InvalidAmountError
        If ``config.amount`` is not a finite number in [0, 1].
    UnknownDeficiencyKindError
        If ``config.kind`` has no daltonization matrix.
    """

    config.validate(TransformMode.DALTONIZE)
    sample = RGBA(*sample)
    kind = parse_kind(config.kind)
    if sample.is_achromatic or kind == DeficiencyKind.NORMAL:
        return sample

    amount = float(config.amount) if config.blend_daltonize else 1.0
    r, g, b = daltonize_array(np.array([sample[:3]], dtype=np.float64), kind, amount)[0]
    return RGBA(int(r), int(g), int(b), sample.a)
