"""
GPU-accelerated colormind transforms backed by PyTorch.
"""

from colormind.torch.color import TorchColorSpace
from colormind.torch.transforms import TorchBatchProcessor, daltonize_tensor, simulate_tensor

__all__ = ["TorchColorSpace", "TorchBatchProcessor", "daltonize_tensor", "simulate_tensor"]
