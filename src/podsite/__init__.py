"""podsite - static site generator for podcast websites."""

__version__ = "0.1.0"
