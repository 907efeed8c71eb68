"""UI components."""

from .screens.dashboard import DashboardScreen
from .widgets.task_table import TaskTable

__all__ = [
    "DashboardScreen",
    "TaskTable",
]
