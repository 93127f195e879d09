"""Export recent daily notes of a Markdown vault, with their linked notes."""

__version__ = "0.1.0"
