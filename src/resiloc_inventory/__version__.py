"""Version information for resiloc-inventory."""

__version__ = "1.1.0"
