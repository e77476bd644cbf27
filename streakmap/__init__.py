"""Contribution streaks and heatmap grids over activity dates."""

__version__ = "0.1.0"
