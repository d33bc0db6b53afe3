"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ytdlp_hq.models.config import AUDIO_IDS, VIDEO_IDS
from ytdlp_hq.models.results import CleanupReport, CleanupStatus, RunSummary
from ytdlp_hq.utils.formatting import format_duration, format_size

_SUGGESTIONS = {
    "UnsupportedPlatformError": [
        "• ytdlp-hq runs on Windows, macOS and Linux only.",
    ],
    "DownloadFetchError": [
        "• yt-dlp could not be downloaded from GitHub.",
        "• Check your internet connection, or install yt-dlp yourself.",
        "• Check that `downloader_version` in the config is a real release.",
    ],
    "ManualInstallRequiredError": [
        "• Install FFmpeg and make sure `ffmpeg` is on your PATH.",
        "• See https://ffmpeg.org/download.html",
    ],
    "ToolInstallError": [
        "• Installing FFmpeg with the package manager failed.",
        "• Install it manually, then run the command again.",
    ],
    "InvalidFormatIdentifierError": [
        f"• Audio IDs: {', '.join(AUDIO_IDS)}",
        f"• Video IDs: {', '.join(VIDEO_IDS)}",
        "• Run `ytdlp-hq formats <URL>` to see what the source offers.",
    ],
    "DownloadFailure": [
        "• Check that the URL is correct and publicly reachable.",
        "• Pick another ID from the format table with -a / -v.",
    ],
    "MergeFailure": [
        "• FFmpeg could not merge the streams.",
        "• Try a different combination of audio and video IDs.",
    ],
    "ConfigurationError": [
        "• Check the values in your config file (`ytdlp-hq --show-config`).",
        "• Run `ytdlp-hq init --force` to write a fresh default config.",
    ],
}


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    suggestions = _SUGGESTIONS.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(str(error))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_format_table(console: Console, listing: str, title: str = "Available formats"):
    """Prints a filtered `yt-dlp -F` listing verbatim inside a panel."""
    if not listing.strip():
        console.print("[yellow]yt-dlp did not report any formats.[/yellow]")
        return
    console.print(
        Panel(
            Text(listing.rstrip()),
            title=f"[bold]{title}[/bold]",
            border_style="yellow",
            expand=False,
        )
    )


def print_cleanup_report(console: Console, report: CleanupReport):
    """Shows per-file cleanup results and the aggregate counts."""
    styles = {
        CleanupStatus.REMOVED: ("✓ removed", "green"),
        CleanupStatus.NOT_FOUND: ("○ not found", "dim"),
        CleanupStatus.ERRORED: ("✗ error", "red"),
    }
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    for entry in report.entries:
        label, style = styles[entry.status]
        detail = f"[{style}]{label}[/{style}]"
        if entry.error:
            detail += f" [dim]({escape(entry.error)})[/dim]"
        table.add_row(escape(entry.path.name), detail)
    console.print(table)
    console.print(f"[dim]{report.summary()}[/dim]")


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration."""
    console = Console()
    if not config_data:
        content = "[dim]No config file; built-in defaults are in use.[/dim]"
    else:
        content = "\n".join(f"{key} = {escape(str(value))}" for key, value in config_data.items())

    console.print(
        Panel(
            content,
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_diagnostics_table(console: Console, rows: list[tuple[str, bool, str]]):
    """Displays (check, passed, detail) rows."""
    table = Table(box=box.ROUNDED, show_header=True)
    table.add_column("Check", style="bold cyan")
    table.add_column("Status", justify="center")
    table.add_column("Detail")
    for check, passed, detail in rows:
        status = "[green]✓[/green]" if passed else "[red]✗[/red]"
        table.add_row(check, status, escape(detail))
    console.print(table)


def print_summary_panel(console: Console, summary: RunSummary):
    """Displays the final summary of a successful run."""
    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=16)
    stats_table.add_column(style="white", justify="left")

    if summary.output_path is not None:
        stats_table.add_row("✓ Saved:", f"[bold green]{escape(summary.output_path.name)}[/bold green]")
        if summary.output_path.exists():
            size = summary.output_path.stat().st_size
            stats_table.add_row("File Size:", f"[cyan]{format_size(size)}[/cyan]")
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(summary.duration_s)}[/blue]"
    )
    if summary.cleanup_report is not None:
        stats_table.add_row(
            "Temp Files:",
            f"{summary.cleanup_report.removed_count} removed",
        )

    console.print()
    console.print(
        Panel(
            stats_table,
            title="🎬 [bold]Download Complete![/bold]",
            border_style="green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
