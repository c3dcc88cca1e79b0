"""Aircraft weight-and-balance report records."""

__version__ = "0.1.0"
