"""
Tests for the deficiency simulation transform.
"""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from colormind import (
    RGBA,
    ColorDivisionError,
    ConfusionLine,
    DeficiencyKind,
    InvalidAmountError,
    TransformConfig,
    UnknownDeficiencyKindError,
    simulate,
)
from colormind.simulate import simulate_array
from colormind.utils.color import rgb_to_xyz, xyz_to_chromaticity

CUSTOM_LINE = ConfusionLine(x=0.7465, y=0.2535, m=1.273463, yint=-0.073894)

ALL_KINDS = [
    TransformConfig(kind=DeficiencyKind.NORMAL),
    TransformConfig(kind=DeficiencyKind.PROTANOPE),
    TransformConfig(kind=DeficiencyKind.DEUTERANOPE),
    TransformConfig(kind=DeficiencyKind.TRITANOPE),
    TransformConfig(kind=DeficiencyKind.ACHROMATOPE),
    TransformConfig(kind=DeficiencyKind.CUSTOM, custom_line=CUSTOM_LINE),
]


def _samples(count: int = 200, seed: int = 11):
    rng = np.random.default_rng(seed)
    return [RGBA(*(int(v) for v in row)) for row in rng.integers(0, 256, size=(count, 4))]


@pytest.mark.parametrize("config", ALL_KINDS, ids=lambda c: c.kind.value)
def test_zero_amount_is_identity(config: TransformConfig) -> None:
    identity = dataclasses.replace(config, amount=0.0)
    for sample in _samples():
        assert simulate(sample, identity) == sample


@pytest.mark.parametrize("config", ALL_KINDS, ids=lambda c: c.kind.value)
def test_range_alpha_and_determinism(config: TransformConfig) -> None:
    for sample in _samples(seed=5):
        result = simulate(sample, config)
        assert result == simulate(sample, config)
        assert result.a == sample.a
        assert all(0 <= channel <= 255 for channel in result)


def test_gray_is_invariant_for_dichromats() -> None:
    gray = RGBA(128, 128, 128, 255)
    config = TransformConfig(kind=DeficiencyKind.DEUTERANOPE, amount=1.0)
    result = simulate(gray, config)
    assert all(abs(channel - 128) <= 1 for channel in result[:3])
    assert result.a == 255


@pytest.mark.parametrize("kind", ["Protanope", "Deuteranope", "Tritanope"])
def test_pure_black_is_not_an_error(kind: str) -> None:
    black = RGBA(0, 0, 0, 255)
    assert simulate(black, TransformConfig(kind=kind)) == black


def test_protanope_darkens_red() -> None:
    result = simulate(RGBA(255, 0, 0, 255), TransformConfig(kind=DeficiencyKind.PROTANOPE))
    assert result.r < 255
    assert result.g > 0


# Full-strength dichromat output for saturated colors. One level of slack
# covers libm differences in the 1/2.2 power.
DICHROMAT_TABLE = [
    ("Protanope", (255, 0, 0), (142, 126, 29)),
    ("Protanope", (0, 255, 0), (248, 219, 0)),
    ("Protanope", (0, 0, 255), (0, 74, 154)),
    ("Protanope", (255, 255, 0), (255, 246, 217)),
    ("Deuteranope", (255, 0, 0), (160, 119, 0)),
    ("Deuteranope", (0, 255, 0), (255, 212, 152)),
    ("Deuteranope", (0, 0, 255), (0, 79, 130)),
    ("Tritanope", (255, 0, 0), (253, 23, 0)),
    ("Tritanope", (0, 255, 0), (117, 236, 255)),
    ("Tritanope", (0, 0, 255), (0, 85, 89)),
]


@pytest.mark.parametrize("kind, rgb, expected", DICHROMAT_TABLE)
def test_dichromat_reference_table(kind: str, rgb, expected) -> None:
    result = simulate(RGBA(*rgb, 200), TransformConfig(kind=kind))
    assert result.a == 200
    np.testing.assert_allclose(result[:3], expected, atol=1)


def test_protanope_yellow_keeps_gamut_fitted_blue() -> None:
    # The gamut fit on normalised channels lifts blue well off 0
    result = simulate(RGBA(255, 255, 0, 255), TransformConfig(kind=DeficiencyKind.PROTANOPE))
    assert result == RGBA(255, 246, 217, 255)


def test_custom_line_matches_table_line() -> None:
    table = TransformConfig(kind=DeficiencyKind.PROTANOPE)
    custom = TransformConfig(kind=DeficiencyKind.CUSTOM, custom_line=CUSTOM_LINE)
    for sample in _samples(50):
        assert simulate(sample, table) == simulate(sample, custom)


def test_achromatope_full_and_partial() -> None:
    full = simulate(RGBA(255, 0, 0, 9), TransformConfig(kind=DeficiencyKind.ACHROMATOPE))
    assert full == RGBA(54, 54, 54, 9)
    half = simulate(
        RGBA(200, 100, 50, 255),
        TransformConfig(kind=DeficiencyKind.ACHROMATOPE, amount=0.5),
    )
    assert half == RGBA(158, 108, 83, 255)

    for level in (0, 1, 128, 254, 255):
        gray = RGBA(level, level, level, 40)
        assert simulate(gray, TransformConfig(kind=DeficiencyKind.ACHROMATOPE)) == gray


def test_vertical_confusion_line_raises() -> None:
    rgb = np.array([[200.0, 30.0, 60.0]])
    x, _ = xyz_to_chromaticity(rgb_to_xyz(rgb / 255.0))
    line = ConfusionLine(x=float(x[0]), y=0.0, m=1.0, yint=0.0)
    config = TransformConfig(kind=DeficiencyKind.CUSTOM, custom_line=line)

    with pytest.raises(ColorDivisionError):
        simulate(RGBA(200, 30, 60, 255), config)

    out, failed = simulate_array(rgb, DeficiencyKind.CUSTOM, 1.0, line)
    assert failed.tolist() == [True]
    np.testing.assert_array_equal(out, [[200, 30, 60]])


def test_array_reports_failures_per_sample() -> None:
    rgb = np.array([[0.0, 0.0, 0.0], [255.0, 0.0, 0.0], [90.0, 90.0, 90.0]])
    out, failed = simulate_array(rgb, DeficiencyKind.TRITANOPE)
    assert out.shape == (3, 3)
    assert not failed.any()
    np.testing.assert_array_equal(out[0], [0, 0, 0])
    np.testing.assert_array_equal(out[2], [90, 90, 90])


def test_custom_without_line_raises() -> None:
    with pytest.raises(UnknownDeficiencyKindError):
        simulate_array(np.array([[1.0, 2.0, 3.0]]), DeficiencyKind.CUSTOM)


@pytest.mark.parametrize("amount", [2.0, -0.5, float("nan"), float("inf"), "much"])
def test_invalid_amount_raises(amount) -> None:
    config = TransformConfig(kind=DeficiencyKind.PROTANOPE, amount=amount)
    with pytest.raises(InvalidAmountError):
        simulate(RGBA(200, 30, 60, 255), config)


@pytest.mark.parametrize("amount", [1.5, -0.1, float("nan")])
def test_array_rejects_invalid_amount(amount: float) -> None:
    rgb = np.array([[200.0, 30.0, 60.0]])
    with pytest.raises(InvalidAmountError):
        simulate_array(rgb, DeficiencyKind.PROTANOPE, amount)
    with pytest.raises(InvalidAmountError):
        simulate_array(rgb, DeficiencyKind.ACHROMATOPE, amount)


def test_simulate_accepts_daltonize_mode_config() -> None:
    line_config = TransformConfig(
        kind=DeficiencyKind.CUSTOM,
        custom_line=CUSTOM_LINE,
        mode="daltonize",
    )
    table = TransformConfig(kind=DeficiencyKind.PROTANOPE)
    assert simulate(RGBA(200, 30, 60, 1), line_config) == simulate(RGBA(200, 30, 60, 1), table)
