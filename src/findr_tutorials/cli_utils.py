"""
Shared console and CLI utilities for findr-tutorials.

Provides the message helpers used by processing and inventory reports,
file-status tables for ``inventory --files``, and error handling that
turns exceptions into a readable panel.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()


def info(message: str) -> None:
    """Print a plain progress message."""
    console.print(escape(message), highlight=False)


def success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(message)}[/green]", highlight=False)


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]{escape(message)}[/yellow]", highlight=False)


def error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{escape(message)}[/red]", highlight=False)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes > 1_000_000_000:
        return f"{size_bytes / 1_000_000_000:.1f} GB"
    elif size_bytes > 1_000_000:
        return f"{size_bytes / 1_000_000:.1f} MB"
    return f"{size_bytes / 1_000:.1f} KB"


def check_file_status(path: Path | str) -> tuple[str, str]:
    """Check if file exists and return status and formatted size.

    Returns:
        Tuple of (status_string, size_string) where status is Rich-formatted
    """
    p = Path(path)
    if p.is_file():
        size_str = format_file_size(p.stat().st_size)
        return "[green]✓ Found[/green]", size_str
    return "[red]✗ Not found[/red]", "-"


def create_file_table(title: str) -> Table:
    """Create a standard table for file status listings."""
    table = Table(title=title, show_header=True)
    table.add_column("File", style="cyan")
    table.add_column("Path", style="dim")
    table.add_column("Status", style="green")
    table.add_column("Size", style="dim")
    return table


def handle_error(
    e: Exception,
    context: str,
    extra_hints: Optional[dict[str, str]] = None
) -> None:
    """Handle exceptions with user-friendly error messages and hints.

    Args:
        e: The exception that occurred
        context: Description of what was being done (e.g., "processing ecoli-grn")
        extra_hints: Additional error patterns and hints to check
    """
    error_msg = str(e)

    hints = {
        "not found": "Run 'findr-tutorials download-info' and check the raw data directory.",
        "Permission denied": "Check file permissions or try a different data directory.",
        "sample order": "Raw tables must list the same samples in the same order.",
        "missing columns": "The raw file does not have the expected layout; re-download it.",
    }

    if extra_hints:
        hints.update(extra_hints)

    hint = "Check input files and parameters. Use --help for usage information."
    for pattern, suggestion in hints.items():
        if pattern.lower() in error_msg.lower():
            hint = suggestion
            break

    console.print(
        Panel(
            f"[red]Error during {context}:[/red]\n"
            f"  {escape(error_msg)}\n\n"
            f"[dim]Hint: {hint}[/dim]",
            title="Error",
            border_style="red",
        )
    )
    raise typer.Exit(code=1)
