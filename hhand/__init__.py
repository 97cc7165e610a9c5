"""Terminal bookmark search and application launcher."""

__version__ = "0.3.0"
