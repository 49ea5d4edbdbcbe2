"""Chirpy: a micro-blog API backed by flat JSON files."""

__version__ = "0.1.0"
