"""Colorful CLI output helpers."""

from rich.console import Console

# Plain output when stdout is not a terminal; rich handles detection
console = Console(highlight=False)


def success(message: str) -> None:
    """Print success message with green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def info(message: str) -> None:
    """Print info message with yellow bullet."""
    console.print(f"[yellow]•[/yellow] {message}")


def error(message: str) -> None:
    """Print error message with red cross."""
    console.print(f"[red]✗[/red] {message}")
