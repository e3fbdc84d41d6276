"""Turn-based card battle engine."""

__version__ = "0.1.0"
