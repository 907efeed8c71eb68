"""Aggregate counts shown above the task table."""

from textual.widgets import Static

from ...models import DashboardConfig, Priority, TaskStats, TaskStatus


def format_stats(stats: TaskStats, config: DashboardConfig) -> str:
    """Render stats as console markup."""
    parts = [f"[b]Total[/b] {stats.total}"]
    for priority in Priority:
        color = config.priority_style(priority).color
        parts.append(f"[{color}]{priority.value}[/] {stats.count_priority(priority)}")
    for status in TaskStatus:
        color = config.status_colors.get(status, "white")
        parts.append(f"[{color}]{status.label}[/] {stats.count_status(status)}")
    return "  │  ".join(parts)


class StatsBar(Static):
    """One-line summary of the server's task counts."""

    DEFAULT_CSS = """
    StatsBar {
        height: 1;
        padding: 0 1;
        background: $surface;
    }
    """

    def show_stats(self, stats: TaskStats, config: DashboardConfig) -> None:
        self.update(format_stats(stats, config))
