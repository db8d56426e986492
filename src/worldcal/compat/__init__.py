"""Per-system display adjustments."""

from .adjuster import CompatibilityAdjuster

__all__ = ["CompatibilityAdjuster"]
