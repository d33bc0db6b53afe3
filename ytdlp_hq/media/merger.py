"""
Merges the downloaded audio and video streams into one file with FFmpeg.
"""

import logging
from pathlib import Path

from rich.markup import escape

from ytdlp_hq.exceptions import MergeFailure
from ytdlp_hq.media.cleanup import CleanupManager
from ytdlp_hq.models.results import CleanupReport, MergeJob
from ytdlp_hq.tools.runner import CommandRunner
from ytdlp_hq.utils.path import build_output_filename, derive_title

log = logging.getLogger(__name__)


class MergePipeline:
    """
    Derives the output title, runs FFmpeg, and removes the temp streams
    whether or not FFmpeg succeeded.
    """

    def __init__(
        self,
        runner: CommandRunner,
        cleanup_manager: CleanupManager,
        work_dir: Path,
        run_logger=None,
    ):
        self.runner = runner
        self.cleanup_manager = cleanup_manager
        self.work_dir = work_dir
        self.run_logger = run_logger

    async def derive_output_title(self, source_url: str, downloader: str) -> str:
        """
        Asks yt-dlp for the filename it would use. If that call fails, its error
        text is used instead, as yt-dlp does not always separate the two.
        """
        try:
            result = await self.runner.run([downloader, "--print", "filename", source_url])
            text = result.stdout if result.ok else result.stderr
        except OSError as e:
            log.debug(f"Could not ask yt-dlp for the filename: {e}")
            text = ""
        text = text.strip()
        log.info(f"Downloaded {escape(text)}. Merging streams...")
        return derive_title(text)

    def _transcode_args(self, transcoder: str, job: MergeJob) -> list[str]:
        return [
            transcoder,
            "-i",
            str(job.video_file),
            "-i",
            str(job.audio_file),
            "-c:v",
            "copy",
            "-c:a",
            "aac",
            "-strict",
            "experimental",
            job.output_filename,
        ]

    async def merge_and_finalize(
        self,
        source_url: str,
        downloader: str,
        transcoder: str,
        audio_file: Path,
        video_file: Path,
    ) -> tuple[MergeJob, CleanupReport]:
        """
        Raises:
            MergeFailure: If FFmpeg exits non-zero. The temp streams are cleaned
                up first; a partially written output file is left in place.
        """
        title = await self.derive_output_title(source_url, downloader)
        job = MergeJob(
            audio_file=audio_file,
            video_file=video_file,
            derived_title=title,
            output_filename=build_output_filename(title),
        )

        try:
            result = await self.runner.run(self._transcode_args(transcoder, job))
        except OSError as e:
            report = self.cleanup_manager.cleanup([video_file, audio_file])
            raise MergeFailure(
                f"FFmpeg could not be started: {e}", -1, str(e), report
            ) from e

        if not result.ok:
            report = self.cleanup_manager.cleanup([video_file, audio_file])
            if self.run_logger:
                self.run_logger.merge_failed(job.output_filename, result.exit_status)
            raise MergeFailure(
                f"FFmpeg process failed with code {result.exit_status}."
                f" Error: {result.stderr.strip()}",
                result.exit_status,
                result.stderr,
                report,
            )

        log.info("[green]FFmpeg process completed successfully[/green]")
        log.debug(result.stdout)
        if self.run_logger:
            self.run_logger.merge_completed(job.output_filename, title)

        report = self.cleanup_manager.cleanup([video_file, audio_file])
        log.info("Merge completed and input files deleted successfully")
        return job, report
