"""Copy PDF documents together with their bookmark tree."""

__version__ = "1.0.0"
