"""
Basic usage examples for colormind.
"""

from __future__ import annotations

import numpy as np

from colormind import (
    RGBA,
    BatchProcessor,
    DeficiencyKind,
    TransformConfig,
    TransformMode,
    daltonize,
    simulate,
    transform_css_colors,
)


def example_single_colors() -> None:
    """Simulate and daltonize one color for each dichromat."""

    red = RGBA(255, 0, 0, 255)
    for kind in (DeficiencyKind.PROTANOPE, DeficiencyKind.DEUTERANOPE, DeficiencyKind.TRITANOPE):
        seen = simulate(red, TransformConfig(kind=kind))
        fixed = daltonize(red, TransformConfig(kind=kind, mode=TransformMode.DALTONIZE))
        print(f"{kind.value:>12}: seen as {tuple(seen)}, daltonized to {tuple(fixed)}")


def example_image() -> np.ndarray:
    """Simulate deuteranopia on an RGBA image using a thread pool."""

    image = np.random.default_rng(0).integers(0, 256, size=(256, 256, 4)).astype(np.uint8)
    config = TransformConfig(kind=DeficiencyKind.DEUTERANOPE, amount=0.75)
    result = BatchProcessor(config, chunk_size=8192, max_workers=4).process(image)
    print(f"Image example output shape: {result.shape}, dtype: {result.dtype}")
    return result


def example_css() -> None:
    """Daltonize computed style colors."""

    config = TransformConfig.from_dict({"mode": "daltonize", "kind": "Protanope"})
    print(transform_css_colors(["rgb(255, 0, 0)", "rgba(0, 128, 0, 0.5)", "transparent"], config))


if __name__ == "__main__":
    print("Running colormind basic examples...")
    example_single_colors()
    example_image()
    example_css()
