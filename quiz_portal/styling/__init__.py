"""Styling module for Quiz Portal application."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
