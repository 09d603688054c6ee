"""Label GitHub pull requests by the size of their change."""

__version__ = "0.1.0"
