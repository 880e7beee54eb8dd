"""Utility functions for SonoView."""

from .visualization import draw_circles, draw_lines, draw_result

__all__ = ["draw_lines", "draw_circles", "draw_result"]
