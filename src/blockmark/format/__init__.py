"""Formatting utilities for markdown bodies."""

from .text import normalize_eol, normalize_markdown, normalize_text

__all__ = [
    "normalize_eol",
    "normalize_markdown",
    "normalize_text",
]
