"""NAMASTE / AYUSH terminology translation service."""

__version__ = "1.0.0"
