"""
The main orchestrator: resolves tools, downloads both streams, merges them,
and always cleans up the temporary files.
"""

import logging
import time
from contextlib import nullcontext
from pathlib import Path

from rich.markup import escape

from ytdlp_hq.exceptions import DownloadFailure, MergeFailure, YtDlpHqError
from ytdlp_hq.media import CleanupManager, DownloadExecutor, FormatSelector, MergePipeline
from ytdlp_hq.media.formats import CONTAINER_EXTENSIONS
from ytdlp_hq.models.config import PipelineConfig
from ytdlp_hq.models.host import HostEnvironment
from ytdlp_hq.models.results import (
    CleanupReport,
    DownloadOutcome,
    RunSummary,
    StreamRequest,
    StreamRole,
)
from ytdlp_hq.models.tools import DOWNLOADER, TRANSCODER
from ytdlp_hq.tools import BinaryFetcher, CommandRunner, DirectFetchStrategy, ToolResolver
from ytdlp_hq.utils.structured_logger import create_structured_logger

log = logging.getLogger(__name__)


def temp_file_paths(work_dir: Path) -> list[Path]:
    """The temp files a run may leave behind, in cleanup order."""
    return [
        work_dir / StreamRequest(role, "", CONTAINER_EXTENSIONS[role]).output_filename
        for role in (StreamRole.VIDEO, StreamRole.AUDIO)
    ]


class NullStages:
    """Stand-in for a progress display; used when no UI is attached."""

    def stage(self, description: str):
        return nullcontext()


class PipelineRunner:
    """Runs one download-and-merge session for a single source URL."""

    def __init__(
        self,
        config: PipelineConfig,
        host: HostEnvironment,
        resolver: ToolResolver | None = None,
        runner_factory=CommandRunner.for_host,
        stages=None,
        log_dir: Path | None = None,
    ):
        self.config = config
        self.host = host
        self.runner_factory = runner_factory
        self.stages = stages or NullStages()
        (
            self.event_log,
            self.tool_logger,
            self.stream_logger,
            self.run_logger,
        ) = create_structured_logger(log_dir, enable_json=config.json_log)
        self.resolver = resolver or ToolResolver(
            fetch_strategy=DirectFetchStrategy(
                BinaryFetcher(), config.downloader_version, config.release_base_url
            ),
            runner_factory=runner_factory,
        )
        self.resolver.tool_logger = self.tool_logger
        self.selector = FormatSelector()
        self.cleanup_manager = CleanupManager(self.run_logger)

    def _temp_files(self) -> list[Path]:
        return temp_file_paths(self.config.work_dir)

    def _abort(self, error: YtDlpHqError, report: CleanupReport | None = None) -> RunSummary:
        if report is None:
            report = self.cleanup_manager.cleanup(self._temp_files())
        return RunSummary(exit_code=1, cleanup_report=report, error=error)

    async def run(self, source_url: str) -> RunSummary:
        start_time = time.monotonic()
        self.event_log.set_session_context(source_url=source_url)
        self.run_logger.run_started(
            source_url,
            self.config.audio_id,
            self.config.video_id,
            self.host.platform_tag.value,
        )
        try:
            try:
                summary = await self._run(source_url)
            except BaseException:
                # Unclassified failures still leave no temp streams behind
                self.cleanup_manager.cleanup(self._temp_files())
                raise
            summary.duration_s = time.monotonic() - start_time
            self.run_logger.run_completed(
                summary.exit_code,
                summary.duration_s,
                str(summary.output_path) if summary.output_path else None,
            )
        finally:
            self.event_log.close()
        return summary

    async def _run(self, source_url: str) -> RunSummary:
        try:
            with self.stages.stage("Checking yt-dlp and FFmpeg"):
                downloader = await self.resolver.ensure_available(DOWNLOADER, self.host)
                transcoder = await self.resolver.ensure_available(
                    TRANSCODER, downloader.host
                )
            self.host = transcoder.host

            audio_request = self.selector.request_for(
                self.config.audio_id, StreamRole.AUDIO
            )
            video_request = self.selector.request_for(
                self.config.video_id, StreamRole.VIDEO
            )
        except YtDlpHqError as e:
            log.error(f"[red]✗ {escape(str(e))}[/red]")
            return self._abort(e)

        runner = self.runner_factory(self.host)
        executor = DownloadExecutor(runner, self.stream_logger)

        for request in (audio_request, video_request):
            with self.stages.stage(f"Downloading {request.role.value} stream"):
                result = await executor.download(source_url, request, downloader.invocation)
            if result.outcome is DownloadOutcome.SUCCESS:
                continue
            if result.outcome is DownloadOutcome.FORMAT_UNAVAILABLE:
                message = (
                    f"{request.role.value.capitalize()} ID"
                    f" {request.format_identifier} is not available for this source."
                )
            else:
                message = (
                    f"yt-dlp failed to download the {request.role.value} stream"
                    f" (exit code {result.exit_status})."
                )
            return self._abort(DownloadFailure(message, result))

        merger = MergePipeline(
            runner, self.cleanup_manager, self.config.work_dir, self.run_logger
        )
        try:
            with self.stages.stage("Merging streams with FFmpeg"):
                job, report = await merger.merge_and_finalize(
                    source_url,
                    downloader.invocation,
                    transcoder.invocation,
                    self.config.work_dir / audio_request.output_filename,
                    self.config.work_dir / video_request.output_filename,
                )
        except MergeFailure as e:
            log.error(f"[red]✗ {escape(str(e))}[/red]")
            return self._abort(e, e.cleanup_report)

        output_path = self.config.work_dir / job.output_filename
        log.info(f"[bold green]✓ Saved {escape(output_path.name)}[/bold green]")
        return RunSummary(exit_code=0, output_path=output_path, cleanup_report=report)
