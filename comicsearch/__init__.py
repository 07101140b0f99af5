"""Keyword search over XKCD comics: normalisation, indexing, update services, limiters and HTTP handlers."""

__version__ = "0.1.0"