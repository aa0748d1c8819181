"""Inkwell: article lifecycle, engagement and ranking core."""

__version__ = "1.0.0"
