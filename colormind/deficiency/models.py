"""
Parameter tables for the supported color vision deficiencies.

Two read-only tables indexed by :class:`DeficiencyKind`: LMS projection
matrices for daltonization and confusion lines for simulation.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Union

import numpy as np

from colormind.core.config import ConfusionLine, DeficiencyKind, parse_kind
from colormind.core.errors import UnknownDeficiencyKindError


def _frozen(rows) -> np.ndarray:
    mat = np.array(rows, dtype=np.float64)
    mat.setflags(write=False)
    return mat


CVD_MATRICES: Mapping[DeficiencyKind, np.ndarray] = MappingProxyType(
    {
        # Reds greatly reduced (1% of men)
        DeficiencyKind.PROTANOPE: _frozen(
            [
                [0.0, 2.02344, -2.52581],
                [0.0, 1.0, 0.0],
                [0.0, 0.0, 1.0],
            ]
        ),
        # Greens greatly reduced (1% of men)
        DeficiencyKind.DEUTERANOPE: _frozen(
            [
                [1.0, 0.0, 0.0],
                [0.494207, 0.0, 1.24827],
                [0.0, 0.0, 1.0],
            ]
        ),
        # Blues greatly reduced (0.003% of the population)
        DeficiencyKind.TRITANOPE: _frozen(
            [
                [1.0, 0.0, 0.0],
                [0.0, 1.0, 0.0],
                [-0.395913, 0.801109, 0.0],
            ]
        ),
    }
)

CONFUSION_LINES: Mapping[DeficiencyKind, ConfusionLine] = MappingProxyType(
    {
        DeficiencyKind.PROTANOPE: ConfusionLine(x=0.7465, y=0.2535, m=1.273463, yint=-0.073894),
        DeficiencyKind.DEUTERANOPE: ConfusionLine(x=1.4, y=-0.4, m=0.968437, yint=0.003331),
        DeficiencyKind.TRITANOPE: ConfusionLine(x=0.1748, y=0.0, m=0.062921, yint=0.292119),
    }
)


def matrix_for(kind: Union[DeficiencyKind, str]) -> np.ndarray:
    """Return the (read-only) LMS projection matrix for a dichromat kind."""

    kind = parse_kind(kind)
    try:
        return CVD_MATRICES[kind]
    except KeyError:
        raise UnknownDeficiencyKindError(
            f"No daltonization matrix for deficiency kind {kind.value}"
        ) from None


def confusion_line_for(
    kind: Union[DeficiencyKind, str],
    custom_line: Optional[ConfusionLine] = None,
) -> ConfusionLine:
    """
    Return the confusion line for ``kind``.

    A ``custom_line`` always wins, so callers may pass an unrecognised kind
    together with their own line.
    """

    if custom_line is not None:
        return custom_line
    kind = parse_kind(kind)
    try:
        return CONFUSION_LINES[kind]
    except KeyError:
        raise UnknownDeficiencyKindError(
            f"No confusion line for deficiency kind {kind.value}"
        ) from None
