"""Escrow marketplace engine for uniquely owned digital assets."""

__version__ = "0.1.0"
