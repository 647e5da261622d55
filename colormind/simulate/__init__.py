"""Deficiency simulation transform."""

from colormind.simulate.simulator import simulate, simulate_array

__all__ = ["simulate", "simulate_array"]
