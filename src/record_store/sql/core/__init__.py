"""Core SQL utilities package."""

from .parameters import PLACEHOLDER, build_positional_params, quote_literal, render_literal

__all__ = [
    "PLACEHOLDER",
    "build_positional_params",
    "quote_literal",
    "render_literal",
]
