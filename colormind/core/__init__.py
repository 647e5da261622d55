"""Configuration, errors and batch processing."""

from colormind.core.config import (
    RGBA,
    ConfusionLine,
    DeficiencyKind,
    TransformConfig,
    TransformMode,
)
from colormind.core.errors import (
    ColorDivisionError,
    ColorMindError,
    InvalidAmountError,
    UnknownDeficiencyKindError,
)

__all__ = [
    "RGBA",
    "ConfusionLine",
    "DeficiencyKind",
    "TransformConfig",
    "TransformMode",
    "ColorMindError",
    "ColorDivisionError",
    "InvalidAmountError",
    "UnknownDeficiencyKindError",
]
