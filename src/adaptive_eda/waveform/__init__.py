"""Waveform visualization utilities."""

from .renderer import AsciiSCRRenderer

__all__ = ["AsciiSCRRenderer"]
