"""Widget components."""

from ..screens.help import HelpScreen
from .command_bar import CommandBar
from .confirm_modal import ConfirmModal
from .parse_modal import ParseModal
from .stats_bar import StatsBar
from .task_form_modal import TaskFormModal
from .task_table import TaskTable

__all__ = [
    "CommandBar",
    "ConfirmModal",
    "HelpScreen",
    "ParseModal",
    "StatsBar",
    "TaskFormModal",
    "TaskTable",
]
