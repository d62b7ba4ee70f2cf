"""Custom Textual widgets for the spannerconn inspector."""

from .options_panel import OptionsPanel, describe_options
from .status_bar import StatusBar

__all__ = ["OptionsPanel", "StatusBar", "describe_options"]
