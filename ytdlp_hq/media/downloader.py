"""
Runs yt-dlp for a single stream and classifies the outcome.
"""

import logging

from rich.markup import escape

from ytdlp_hq.models.results import DownloadOutcome, DownloadResult, StreamRequest
from ytdlp_hq.tools.runner import CommandRunner

log = logging.getLogger(__name__)

# yt-dlp's wording for an ID the source does not offer. If yt-dlp rephrases
# this message, failures fall through to OTHER_FAILURE.
FORMAT_UNAVAILABLE_MARKER = "Requested format is not available"

_FORMAT_TABLE_HEADER = "[info] Available formats"
_PREAMBLE_PREFIXES = ("[generic]", "[youtube]")


def classify_download_failure(stderr: str) -> DownloadOutcome:
    """Maps the error text of a failed download to an outcome."""
    if FORMAT_UNAVAILABLE_MARKER in (stderr or ""):
        return DownloadOutcome.FORMAT_UNAVAILABLE
    return DownloadOutcome.OTHER_FAILURE


def filter_format_listing(output: str) -> str:
    """
    Drops extractor chatter ahead of the format table in `yt-dlp -F` output.

    Lines before the "[info] Available formats" header that start with
    "[generic]" or "[youtube]" are removed; the table itself is kept verbatim.
    """
    filtered: list[str] = []
    in_table = False
    for line in output.split("\n"):
        if line.startswith(_FORMAT_TABLE_HEADER):
            in_table = True
        if in_table or not line.startswith(_PREAMBLE_PREFIXES):
            filtered.append(line)
    return "\n".join(filtered)


class DownloadExecutor:
    """Downloads one stream with yt-dlp. Failures are returned, never retried."""

    def __init__(self, runner: CommandRunner, stream_logger=None):
        self.runner = runner
        self.stream_logger = stream_logger

    async def list_formats(self, source_url: str, tool: str) -> str:
        """Returns the filtered format table yt-dlp reports for `source_url`."""
        try:
            result = await self.runner.run([tool, "-F", source_url])
        except OSError as e:
            log.error(f"[red]Could not list formats: {e}[/red]")
            return ""
        return filter_format_listing(result.stdout)

    async def download(
        self, source_url: str, request: StreamRequest, tool: str
    ) -> DownloadResult:
        log.info(f"Downloading {escape(source_url)} {request.role.value} stream...")
        if self.stream_logger:
            self.stream_logger.started(
                request.role.value, request.format_identifier, request.output_filename
            )

        args = [
            tool,
            "-f",
            request.format_identifier,
            source_url,
            "-o",
            request.output_filename,
        ]
        try:
            command = await self.runner.run(args)
        except OSError as e:
            result = DownloadResult(
                request, -1, "", str(e), DownloadOutcome.OTHER_FAILURE
            )
            self._log_failure(result)
            return result

        if command.ok:
            log.debug(command.stdout)
            log.info(
                f"[green]✓ {request.role.value.capitalize()} stream saved to"
                f" {request.output_filename}[/green]"
            )
            if self.stream_logger:
                self.stream_logger.completed(request.role.value, request.output_filename)
            return DownloadResult(
                request,
                command.exit_status,
                command.stdout,
                command.stderr,
                DownloadOutcome.SUCCESS,
            )

        outcome = classify_download_failure(command.stderr)
        result = DownloadResult(
            request, command.exit_status, command.stdout, command.stderr, outcome
        )
        if outcome is DownloadOutcome.FORMAT_UNAVAILABLE:
            log.warning(
                f"[yellow]{request.role.value.capitalize()} ID"
                f" {request.format_identifier} not available. Please select a valid"
                " ID.[/yellow]"
            )
            result.format_listing = await self.list_formats(source_url, tool)
        self._log_failure(result)
        return result

    def _log_failure(self, result: DownloadResult) -> None:
        if result.outcome is DownloadOutcome.OTHER_FAILURE:
            log.error(
                "[red]An error occurred during download:[/red]"
                f" {escape(result.captured_stderr.strip())}"
            )
        if self.stream_logger:
            self.stream_logger.failed(
                result.request.role.value,
                result.outcome.value,
                result.exit_status,
                result.captured_stderr.strip(),
            )
