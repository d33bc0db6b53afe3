"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from ytdlp_hq import __version__
from ytdlp_hq.core.pipeline import PipelineRunner, temp_file_paths
from ytdlp_hq.exceptions import ConfigurationError, UnsupportedPlatformError
from ytdlp_hq.host import current_platform_tag, detect_distro_family
from ytdlp_hq.media import CleanupManager, DownloadExecutor
from ytdlp_hq.models.config import AUDIO_IDS, VIDEO_IDS, PipelineConfig
from ytdlp_hq.models.host import HostEnvironment
from ytdlp_hq.models.tools import DOWNLOADER, TRANSCODER
from ytdlp_hq.storage.config_manager import ConfigManager
from ytdlp_hq.tools import BinaryFetcher, CommandRunner, DirectFetchStrategy, ToolResolver

from .formatters import (
    format_error_with_suggestions,
    print_cleanup_report,
    print_config,
    print_diagnostics_table,
    print_format_table,
    print_summary_panel,
)
from .progress_manager import StageProgress

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("ytdlp_hq")

app = typer.Typer(
    name="ytdlp-hq",
    help=(
        "Download high quality videos with audio, using yt-dlp and FFmpeg. Use"
        " 'ytdlp-hq <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "ytdlp-hq"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"
LOG_DIR = CONFIG_DIR / "logs"


def _load_config(cli_options: dict) -> PipelineConfig:
    try:
        return ConfigManager(CONFIG_FILE).load_config(cli_options)
    except ConfigurationError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e


def _resolver_for(config: PipelineConfig) -> ToolResolver:
    return ToolResolver(
        fetch_strategy=DirectFetchStrategy(
            BinaryFetcher(), config.downloader_version, config.release_base_url
        )
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-V",
        count=True,
        help="Increase logging verbosity (-VV for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """yt-dlp + FFmpeg high quality downloader"""
    if version:
        console.print(f"[bold]ytdlp-hq[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    log.setLevel(log_level)
    log.debug(f"ytdlp-hq {__version__}, config file {CONFIG_FILE}")

    if show_config:
        print_config(CONFIG_FILE, ConfigManager(CONFIG_FILE).get_config_as_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing config without asking."
    ),
):
    """Write a default configuration file."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    try:
        ConfigManager(CONFIG_FILE).save_new_config()
    except ConfigurationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")


@app.command(name="download")
def download_command(
    url: str = typer.Argument(..., help="The video URL to download."),
    audio_id: str | None = typer.Option(
        None,
        "-a",
        "--audio-id",
        help=f"A yt-dlp audio format ID ({', '.join(AUDIO_IDS)}). See yt-dlp -F.",
    ),
    video_id: str | None = typer.Option(
        None,
        "-v",
        "--video-id",
        help=f"A yt-dlp video format ID ({', '.join(VIDEO_IDS)}). See yt-dlp -F.",
    ),
    work_dir: Path | None = typer.Option(
        None,
        "--work-dir",
        help="Directory for temp streams, the merged file and a fetched yt-dlp.",
    ),
    json_log: bool | None = typer.Option(
        None,
        "--json-log/--no-json-log",
        help="Write a JSON-lines event log to the config directory.",
    ),
):
    """Download the audio and video streams of URL and merge them."""
    cli_options = {
        key: value
        for key, value in {
            "audio_id": audio_id,
            "video_id": video_id,
            "work_dir": work_dir,
            "json_log": json_log,
        }.items()
        if value is not None
    }
    cli_options["source_url"] = url
    config = _load_config(cli_options)

    try:
        platform_tag = current_platform_tag()
    except UnsupportedPlatformError as e:
        CleanupManager().cleanup(temp_file_paths(config.work_dir))
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    host = HostEnvironment.from_process(platform_tag, config.work_dir)

    async def _download_async():
        with StageProgress(console, enabled=console.is_terminal) as stages:
            runner = PipelineRunner(
                config,
                host,
                resolver=_resolver_for(config),
                stages=stages,
                log_dir=LOG_DIR,
            )
            return await runner.run(url)

    summary = asyncio.run(_download_async())

    if summary.format_listing:
        print_format_table(console, summary.format_listing, "Please select a valid ID")
    if summary.error is not None:
        console.print(format_error_with_suggestions(summary.error))
    if summary.succeeded:
        print_summary_panel(console, summary)
    elif summary.cleanup_report is not None:
        print_cleanup_report(console, summary.cleanup_report)

    raise typer.Exit(code=summary.exit_code)


@app.command(name="formats")
def formats_command(
    url: str = typer.Argument(..., help="The video URL to inspect."),
):
    """List the format IDs yt-dlp offers for URL."""
    config = _load_config({"source_url": url})
    host = HostEnvironment.from_process(current_platform_tag(), config.work_dir)

    async def _formats_async() -> str:
        downloader = await _resolver_for(config).ensure_available(DOWNLOADER, host)
        executor = DownloadExecutor(CommandRunner.for_host(downloader.host))
        return await executor.list_formats(url, downloader.invocation)

    print_format_table(console, asyncio.run(_formats_async()))


@app.command(name="cleanup")
def cleanup_command(
    work_dir: Path | None = typer.Option(
        None, "--work-dir", help="Directory holding the temp streams."
    ),
):
    """Remove temp stream files left behind by an interrupted run."""
    cli_options = {"work_dir": work_dir} if work_dir is not None else {}
    config = _load_config(cli_options)
    report = CleanupManager().cleanup(temp_file_paths(config.work_dir))
    print_cleanup_report(console, report)


@app.command()
def diagnose():
    """Check the platform, the external tools, and connectivity."""
    console.print("\n[bold cyan]Running diagnostics...[/bold cyan]\n")
    rows: list[tuple[str, bool, str]] = []

    config = _load_config({})
    rows.append(("Configuration", True, str(CONFIG_FILE) if CONFIG_FILE.is_file() else "defaults"))

    try:
        platform_tag = current_platform_tag()
    except UnsupportedPlatformError as e:
        rows.append(("Platform", False, str(e)))
        print_diagnostics_table(console, rows)
        raise typer.Exit(code=1) from e
    rows.append(("Platform", True, platform_tag.value))
    rows.append(("Distribution", True, detect_distro_family(platform_tag).value))

    host = HostEnvironment.from_process(platform_tag, config.work_dir)
    resolver = _resolver_for(config)
    release_url = DOWNLOADER.source_url(
        platform_tag, config.downloader_version, config.release_base_url
    )

    async def _checks():
        import aiohttp

        results = []
        for spec in (DOWNLOADER, TRANSCODER):
            present = await resolver.is_present(spec, host)
            invocation = spec.system_invocation(platform_tag)
            results.append(
                (spec.system_name, present, invocation if present else "not found")
            )
        try:
            timeout = aiohttp.ClientTimeout(total=10)
            async with (
                aiohttp.ClientSession(timeout=timeout) as session,
                session.head(release_url, allow_redirects=True) as resp,
            ):
                results.append(("Release host", resp.ok, f"{resp.status} {release_url}"))
        except Exception as e:
            results.append(("Release host", False, f"Connection test failed: {e}"))
        return results

    rows.extend(asyncio.run(_checks()))
    print_diagnostics_table(console, rows)

    if all(passed for _, passed, _ in rows):
        console.print("\n[bold green]✓ All checks passed! Your setup looks good.[/bold green]\n")
    else:
        console.print(
            "\n[bold yellow]Some checks failed. Missing tools are provisioned"
            " automatically by `download` where possible.[/bold yellow]\n"
        )
