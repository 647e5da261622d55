"""Daltonization transform."""

from colormind.daltonize.daltonizer import daltonize, daltonize_array

__all__ = ["daltonize", "daltonize_array"]
