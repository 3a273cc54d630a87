"""circulardeps - circular dependency detection for module graphs."""

__version__ = "0.1.0"
