"""Quantitative calculation core for the calculator library."""

__version__ = "0.1.0"
