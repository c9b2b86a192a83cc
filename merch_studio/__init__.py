"""Merch Studio: turn 2D designs into AI-enhanced merchandise mockups."""

__version__ = "1.0.0"
