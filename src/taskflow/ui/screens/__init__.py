"""Screen components."""

from .dashboard import DashboardScreen
from .help import HelpScreen

__all__ = [
    "DashboardScreen",
    "HelpScreen",
]
