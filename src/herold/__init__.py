"""Deterministic family tree layout and SVG rendering."""

__version__ = "0.3.0"
