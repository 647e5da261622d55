"""colormind: color vision deficiency simulation and daltonization.

Pure, vectorised transforms that show how colors look to protanopes,
deuteranopes, tritanopes and achromatopes, and that shift colors so the
information a dichromat would miss moves into channels they can see.
"""

from colormind.core.batch import BatchProcessor, apply_to_buffer, transform_css_colors
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
from colormind.daltonize import daltonize
from colormind.simulate import simulate

__all__ = [
    "RGBA",
    "ConfusionLine",
    "DeficiencyKind",
    "TransformConfig",
    "TransformMode",
    "BatchProcessor",
    "apply_to_buffer",
    "transform_css_colors",
    "daltonize",
    "simulate",
    "ColorMindError",
    "ColorDivisionError",
    "InvalidAmountError",
    "UnknownDeficiencyKindError",
]

try:  # Optional PyTorch acceleration
    from colormind.torch import TorchBatchProcessor  # type: ignore

    __all__.append("TorchBatchProcessor")
except ImportError:  # pragma: no cover - torch not installed
    TorchBatchProcessor = None  # type: ignore

__version__ = "1.0.0"
