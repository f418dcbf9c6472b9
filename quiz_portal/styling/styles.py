"""Centralized styles and font definitions for the application."""

from quiz_portal.core.scoring import ScoreBand

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 8px;
                padding: 10px 16px;
                text-align: left;
            }}
            QPushButton:checked {{
                background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
                border: 1px solid {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
            }}
            QPushButton:disabled {{
                background-color: {ColorPalette.BUTTON_DISABLED_BG.get(theme)};
            }}
            QLineEdit {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px;
            }}
        """

    @staticmethod
    def get_title_style(theme: Theme = Theme.LIGHT) -> str:
        return f"font-size: 20pt; font-weight: 600; color: {ColorPalette.ACCENT_PRIMARY.get(theme)};"

    @staticmethod
    def get_primary_button_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"QPushButton {{ background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};"
            f" color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)}; font-weight: 600; text-align: center; }}"
        )

    @staticmethod
    def get_timer_style(running_out: bool, theme: Theme = Theme.LIGHT) -> str:
        background = ColorPalette.WARNING if running_out else ColorPalette.ACCENT_PRIMARY
        return (
            f"background-color: {background.get(theme)}; color: white; font-weight: 600;"
            " padding: 6px 14px; border-radius: 12px;"
        )

    @staticmethod
    def get_score_style(band: ScoreBand, theme: Theme = Theme.LIGHT) -> str:
        colors = {
            ScoreBand.GOOD: ColorPalette.SUCCESS,
            ScoreBand.FAIR: ColorPalette.WARNING,
            ScoreBand.POOR: ColorPalette.ERROR,
        }
        return f"font-size: 32pt; font-weight: bold; color: {colors[band].get(theme)};"

    @staticmethod
    def get_error_label_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.ERROR.get(theme)};"

    @staticmethod
    def get_overlay_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"QFrame#fullscreenOverlay {{ background-color: {ColorPalette.OVERLAY_BACKGROUND.get(theme)}; }}"
            " QFrame#fullscreenOverlay QLabel { color: white; background: transparent; }"
        )
