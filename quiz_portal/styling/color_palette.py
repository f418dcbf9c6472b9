"""Color palette for Quiz Portal supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the application."""

    # Text colors
    TEXT_PRIMARY = ThemeColors(
        light="#202124",      # Near black
        dark="#F5F5F5"        # WhiteSmoke
    )

    TEXT_SECONDARY = ThemeColors(
        light="#666666",      # Dark Gray
        dark="#AAAAAA"        # Light Gray
    )

    # Background colors
    BACKGROUND_PRIMARY = ThemeColors(
        light="#FFFFFF",      # White
        dark="#1E1E1E"        # Dark Gray
    )

    BACKGROUND_SECONDARY = ThemeColors(
        light="#F7F9FC",      # Pale blue-gray
        dark="#2D2D2D"        # Slightly lighter dark
    )

    OVERLAY_BACKGROUND = ThemeColors(
        light="rgba(0, 0, 0, 200)",
        dark="rgba(0, 0, 0, 220)"
    )

    # Accent colors
    ACCENT_PRIMARY = ThemeColors(
        light="#4285F4",      # Blue
        dark="#4A9EFF"        # Lighter Blue
    )

    # Status colors
    SUCCESS = ThemeColors(
        light="#28A745",      # Green
        dark="#6FCF6F"        # Light Green
    )

    WARNING = ThemeColors(
        light="#FF9800",      # Orange
        dark="#FFC83D"        # Lighter Orange
    )

    ERROR = ThemeColors(
        light="#DC3545",      # Red
        dark="#FF6B6B"        # Light Red
    )

    # Border colors
    BORDER_PRIMARY = ThemeColors(
        light="#EAEAEA",      # Gray
        dark="#555555"        # Dark Gray
    )

    # Button colors
    BUTTON_PRIMARY_BG = ThemeColors(
        light="#4285F4",      # Blue
        dark="#4A9EFF"        # Lighter Blue
    )

    BUTTON_PRIMARY_TEXT = ThemeColors(
        light="#FFFFFF",      # White
        dark="#000000"        # Black
    )

    BUTTON_DISABLED_BG = ThemeColors(
        light="#B3B3B3",      # Gray
        dark="#505050"        # Medium Gray
    )
