"""Terminal dashboard standing in for the menu-bar popover."""

from clawshield.tui.app import DashboardApp
from clawshield.tui.state import DashboardState, ViewMode

__all__ = ["DashboardApp", "DashboardState", "ViewMode"]
