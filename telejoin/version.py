"""Version information for telejoin."""

__version__ = "0.1.0"
