"""
Color space transforms implemented with torch tensors.
"""

from __future__ import annotations

import torch

from colormind.utils.color import (
    GAMMA,
    LMS_TO_RGB_ERROR,
    LUMINANCE_WEIGHTS,
    RGB_TO_LMS,
    SRGB_TO_XYZ,
    XYZ_TO_SRGB,
)


class TorchColorSpace:
    """Torch equivalent of the ``colormind.utils.color`` functions."""

    def __init__(self, device: torch.device = torch.device("cpu"), dtype: torch.dtype = torch.float32) -> None:
        self.device = device
        self.dtype = dtype

        def tensor(values) -> torch.Tensor:
            return torch.tensor(values.tolist(), dtype=dtype, device=device)

        self.rgb_to_lms_matrix = tensor(RGB_TO_LMS)
        self.lms_to_rgb_error_matrix = tensor(LMS_TO_RGB_ERROR)
        self.srgb_to_xyz_matrix = tensor(SRGB_TO_XYZ)
        self.xyz_to_srgb_matrix = tensor(XYZ_TO_SRGB)
        self.luminance_weights = tensor(LUMINANCE_WEIGHTS)

    def _matmul_channel(self, mat: torch.Tensor, values: torch.Tensor) -> torch.Tensor:
        """
        Multiply a 3x3 matrix with a tensor whose last axis holds channels.
        """

        return torch.tensordot(values, mat.T, dims=([values.dim() - 1], [0]))

    def rgb_to_lms(self, rgb: torch.Tensor) -> torch.Tensor:
        return self._matmul_channel(self.rgb_to_lms_matrix, rgb)

    def lms_to_rgb_error(self, lms: torch.Tensor) -> torch.Tensor:
        return self._matmul_channel(self.lms_to_rgb_error_matrix, lms)

    def rgb_to_xyz(self, rgb: torch.Tensor) -> torch.Tensor:
        """
        Gamma-expand normalised sRGB (expects channels last) and convert to XYZ.
        """

        return self._matmul_channel(self.srgb_to_xyz_matrix, self.gamma_expand(rgb))

    def xyz_to_linear_rgb(self, xyz: torch.Tensor) -> torch.Tensor:
        return self._matmul_channel(self.xyz_to_srgb_matrix, xyz)

    def gamma_expand(self, values: torch.Tensor) -> torch.Tensor:
        return torch.clamp(values, min=0.0) ** GAMMA

    def gamma_compress(self, values: torch.Tensor) -> torch.Tensor:
        return torch.clamp(values, min=0.0) ** (1.0 / GAMMA)

    def rgb_to_luminance(self, rgb: torch.Tensor) -> torch.Tensor:
        return torch.tensordot(rgb, self.luminance_weights, dims=([rgb.dim() - 1], [0]))
