"""
Smoke tests for the torch backend. Skipped automatically when torch is unavailable.
"""

from __future__ import annotations

import numpy as np
import pytest

torch = pytest.importorskip("torch")

from colormind import BatchProcessor, DeficiencyKind, TransformConfig, TransformMode  # noqa: E402
from colormind.torch import TorchBatchProcessor  # noqa: E402


def _image() -> np.ndarray:
    return np.random.default_rng(9).integers(0, 256, size=(16, 16, 4)).astype(np.uint8)


@pytest.mark.parametrize("mode", list(TransformMode))
@pytest.mark.parametrize(
    "kind",
    [DeficiencyKind.PROTANOPE, DeficiencyKind.DEUTERANOPE, DeficiencyKind.TRITANOPE],
)
def test_torch_matches_numpy(mode: TransformMode, kind: DeficiencyKind) -> None:
    image = _image()
    config = TransformConfig(kind=kind, mode=mode)
    expected = BatchProcessor(config).process(image).astype(int)

    result = TorchBatchProcessor(
        config, device=torch.device("cpu"), dtype=torch.float64
    ).process(torch.from_numpy(image))

    assert result.shape == image.shape
    assert result.dtype == torch.uint8
    np.testing.assert_allclose(result.numpy().astype(int), expected, atol=1)


def test_torch_preserves_alpha_and_grays() -> None:
    pixels = torch.tensor([[0, 0, 0, 255], [77, 77, 77, 3], [255, 0, 0, 40]], dtype=torch.uint8)
    config = TransformConfig(kind=DeficiencyKind.TRITANOPE)
    result = TorchBatchProcessor(config, device=torch.device("cpu")).process(pixels)
    assert result[:, 3].tolist() == [255, 3, 40]
    assert result[0].tolist() == [0, 0, 0, 255]
    assert result[1].tolist() == [77, 77, 77, 3]


def test_torch_achromatope() -> None:
    config = TransformConfig(kind=DeficiencyKind.ACHROMATOPE)
    result = TorchBatchProcessor(config, device=torch.device("cpu")).process(
        np.array([[255.0, 0.0, 0.0, 9.0]])
    )
    assert result.dtype == torch.float64
    assert result[0].tolist() == [54.0, 54.0, 54.0, 9.0]


def test_torch_rejects_bad_shape() -> None:
    with pytest.raises(ValueError):
        TorchBatchProcessor(device=torch.device("cpu")).process(torch.zeros(4, 3))


def test_torch_transforms_reject_invalid_amount() -> None:
    from colormind import InvalidAmountError
    from colormind.torch.transforms import daltonize_tensor, simulate_tensor

    rgb = torch.tensor([[200.0, 30.0, 60.0]], dtype=torch.float64)
    with pytest.raises(InvalidAmountError):
        simulate_tensor(rgb, DeficiencyKind.PROTANOPE, amount=2.0)
    with pytest.raises(InvalidAmountError):
        daltonize_tensor(rgb, DeficiencyKind.PROTANOPE, amount=float("nan"))
