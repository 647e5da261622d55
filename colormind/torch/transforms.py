"""
Torch-powered simulate / daltonize transforms.

Semantics match the numpy path; computations default to float32, so a
channel may land one level lower where the numpy result sits right on an
integer boundary.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

import numpy as np
import torch

from colormind.core.config import (
    ConfusionLine,
    DeficiencyKind,
    TransformConfig,
    TransformMode,
    check_amount,
    parse_kind,
)
from colormind.core.errors import ColorDivisionError, UnknownDeficiencyKindError
from colormind.deficiency.models import confusion_line_for, matrix_for
from colormind.torch.color import TorchColorSpace
from colormind.utils.color import NEUTRAL_X_PER_Y, NEUTRAL_Z_PER_Y, QUANTIZE_TOLERANCE

logger = logging.getLogger(__name__)

_ERROR_SHIFT = [
    [0.0, 0.0, 0.0],
    [0.7, 1.0, 0.0],
    [0.7, 0.0, 1.0],
]


def _quantize(values: torch.Tensor) -> torch.Tensor:
    if not values.is_floating_point():
        return torch.clamp(values, 0, 255).to(torch.int64)
    # float32 noise is far coarser than float64
    tolerance = max(QUANTIZE_TOLERANCE, 1024 * torch.finfo(values.dtype).eps)
    return torch.floor(torch.clamp(values, 0.0, 255.0) + tolerance).to(torch.int64)


def _chromatic_mask(rgb: torch.Tensor) -> torch.Tensor:
    return ~((rgb[..., 0] == rgb[..., 1]) & (rgb[..., 1] == rgb[..., 2]))


def daltonize_tensor(
    rgb: torch.Tensor,
    kind: Union[DeficiencyKind, str],
    amount: float = 1.0,
    space: Optional[TorchColorSpace] = None,
) -> torch.Tensor:
    """
    Daltonize a (N, 3) tensor of 0-255 channels.
    """

    amount = check_amount(amount)
    kind = parse_kind(kind)
    if kind == DeficiencyKind.NORMAL or amount == 0.0:
        return _quantize(rgb)

    space = space or TorchColorSpace(device=rgb.device, dtype=rgb.dtype)
    cvd = torch.tensor(matrix_for(kind).tolist(), dtype=rgb.dtype, device=rgb.device)
    shift = torch.tensor(_ERROR_SHIFT, dtype=rgb.dtype, device=rgb.device)

    lms = space._matmul_channel(cvd, space.rgb_to_lms(rgb))
    error = rgb - space.lms_to_rgb_error(lms)
    corrected = torch.clamp(rgb + space._matmul_channel(shift, error), 0.0, 255.0)
    if amount != 1.0:
        corrected = rgb * (1.0 - amount) + corrected * amount

    out = torch.where(_chromatic_mask(rgb).unsqueeze(-1), corrected, rgb)
    return _quantize(out)


def simulate_tensor(
    rgb: torch.Tensor,
    kind: Union[DeficiencyKind, str],
    amount: float = 1.0,
    custom_line: Optional[ConfusionLine] = None,
    space: Optional[TorchColorSpace] = None,
) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Simulate a deficiency over a (N, 3) tensor of 0-255 channels.

    Returns integer channels and a boolean mask of samples left unchanged
    because their confusion-line geometry was degenerate.
    """

    amount = check_amount(amount)
    failed = torch.zeros(rgb.shape[:-1], dtype=torch.bool, device=rgb.device)
    try:
        kind = parse_kind(kind)
    except UnknownDeficiencyKindError:
        if custom_line is None:
            raise
        kind = DeficiencyKind.CUSTOM
    if kind == DeficiencyKind.NORMAL or amount == 0.0:
        return _quantize(rgb), failed

    space = space or TorchColorSpace(device=rgb.device, dtype=rgb.dtype)

    if kind == DeficiencyKind.ACHROMATOPE:
        mono = space.rgb_to_luminance(rgb).unsqueeze(-1)
        return _quantize(rgb * (1.0 - amount) + mono * amount), failed

    line = confusion_line_for(kind, custom_line)

    xyz = space.rgb_to_xyz(rgb / 255.0)
    big_y = xyz[..., 1]
    total = xyz.sum(dim=-1)
    chroma_x = xyz[..., 0] / total
    chroma_y = big_y / total

    dx = chroma_x - line.x
    slope = (chroma_y - line.y) / dx
    yint = chroma_y - chroma_x * slope
    denom = slope - line.m
    deviate_x = (line.yint - yint) / denom
    deviate_y = slope * deviate_x + yint

    sim_x = deviate_x * big_y / deviate_y
    sim_z = (1.0 - (deviate_x + deviate_y)) * big_y / deviate_y
    sim_xyz = torch.stack([sim_x, big_y, sim_z], dim=-1)
    neutral_offset = torch.stack(
        [NEUTRAL_X_PER_Y * big_y - sim_x, torch.zeros_like(big_y), NEUTRAL_Z_PER_Y * big_y - sim_z],
        dim=-1,
    )
    diff = space.xyz_to_linear_rgb(neutral_offset)
    linear = space.xyz_to_linear_rgb(sim_xyz)

    bound = (linear >= 0.0).to(linear.dtype)
    fit = (bound - linear) / diff
    fit = torch.where(torch.isfinite(fit) & (fit >= 0.0) & (fit <= 1.0), fit, torch.zeros_like(fit))
    adjust = fit.max(dim=-1, keepdim=True).values
    linear = linear + adjust * diff

    encoded = space.gamma_compress(torch.clamp(linear, 0.0, 1.0)) * 255.0
    blended = rgb * (1.0 - amount) + encoded * amount

    chromatic = _chromatic_mask(rgb)
    bad = (dx == 0.0) | (denom == 0.0) | (deviate_y == 0.0) | ~torch.isfinite(blended).all(dim=-1)
    failed = chromatic & bad
    keep = (~chromatic | bad).unsqueeze(-1)
    out = torch.where(keep, rgb, blended)
    return _quantize(out), failed


class TorchBatchProcessor:
    """
    Batch transforms on torch tensors whose last axis holds RGBA channels.
    """

    def __init__(
        self,
        config: Optional[TransformConfig] = None,
        device: Optional[torch.device] = None,
        dtype: torch.dtype = torch.float32,
        on_error: str = "passthrough",
    ) -> None:
        self.config = config or TransformConfig()
        self.config.validate()
        if on_error not in ("passthrough", "raise"):
            raise ValueError(f"on_error must be 'passthrough' or 'raise', got {on_error!r}")

        if device is None:
            device = torch.device("cuda" if torch.cuda.is_available() else "cpu")

        self.device = device
        self.dtype = dtype
        self.on_error = on_error
        self.space = TorchColorSpace(device=device, dtype=dtype)

        logger.info("Initializing TorchBatchProcessor (%s)", self.device)
        logger.info("  Mode: %s", self.config.mode.value)
        logger.info("  Kind: %s", self.config.kind.value)

    def process(self, buffer: Union[torch.Tensor, np.ndarray]) -> torch.Tensor:
        """
        Transform every sample; returns a tensor of the input's shape and dtype.
        """

        source = buffer if isinstance(buffer, torch.Tensor) else torch.as_tensor(buffer)
        if source.dim() < 1 or source.shape[-1] != 4:
            raise ValueError(f"Expected tensor with trailing axis of 4 channels, got shape {tuple(source.shape)}")

        pixels = source.to(device=self.device, dtype=self.dtype)
        if not torch.isfinite(pixels).all():
            raise ValueError("Buffer contains NaN or Inf values")
        if pixels.numel() and (pixels.min() < 0 or pixels.max() > 255):
            raise ValueError("Buffer channels must lie in [0, 255]")

        flat = pixels.reshape(-1, 4)
        rgb = flat[:, :3]
        logger.info("Processing %d samples on %s", flat.shape[0], self.device)

        config = self.config
        if config.mode == TransformMode.DALTONIZE:
            amount = float(config.amount) if config.blend_daltonize else 1.0
            result = daltonize_tensor(rgb, config.kind, amount, self.space)
            failed = torch.zeros(flat.shape[0], dtype=torch.bool, device=self.device)
        else:
            result, failed = simulate_tensor(
                rgb, config.kind, float(config.amount), config.custom_line, self.space
            )

        if bool(failed.any()):
            if self.on_error == "raise":
                raise ColorDivisionError(f"{int(failed.sum())} sample(s) could not be transformed")
            logger.warning(
                "%d sample(s) hit a degenerate confusion line and were left unchanged",
                int(failed.sum()),
            )

        out = torch.cat([result.to(self.dtype), flat[:, 3:]], dim=-1)
        return out.reshape(pixels.shape).to(device=source.device, dtype=source.dtype)
