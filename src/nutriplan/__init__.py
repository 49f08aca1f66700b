"""Nutrition targets and balanced daily meal plans."""

__version__ = "0.1.0"
