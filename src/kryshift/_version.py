"""Version information for kryshift."""

__version__ = "0.1.0"
