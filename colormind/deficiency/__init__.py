"""Deficiency parameter tables."""

from colormind.deficiency.models import (
    CONFUSION_LINES,
    CVD_MATRICES,
    confusion_line_for,
    matrix_for,
)

__all__ = [
    "CVD_MATRICES",
    "CONFUSION_LINES",
    "matrix_for",
    "confusion_line_for",
]
