"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ytdlp_hq.models.results import CleanupReport, DownloadResult


class YtDlpHqError(Exception):
    """Base exception for all application-specific errors."""


class UnsupportedPlatformError(YtDlpHqError):
    """Raised when the host operating system is not windows, macOS or linux."""


class DownloadFetchError(YtDlpHqError):
    """Raised when the yt-dlp binary cannot be fetched from the release host."""


class ManualInstallRequiredError(YtDlpHqError):
    """Raised when a tool is missing and cannot be installed automatically."""


class ToolInstallError(YtDlpHqError):
    """Raised when the system package manager fails to install a tool."""


class ConfigurationError(YtDlpHqError):
    """Raised for issues related to configuration loading or validation."""


class InvalidFormatIdentifierError(YtDlpHqError):
    """Raised when a format ID is in neither the audio nor the video set."""


class DownloadFailure(YtDlpHqError):
    """Raised when yt-dlp fails to download one of the streams."""

    def __init__(self, message: str, result: DownloadResult):
        super().__init__(message)
        self.result = result

    @property
    def outcome(self):
        return self.result.outcome


class MergeFailure(YtDlpHqError):
    """Raised when FFmpeg exits with a non-zero status while merging."""

    def __init__(
        self,
        message: str,
        exit_status: int,
        stderr: str,
        cleanup_report: CleanupReport | None = None,
    ):
        super().__init__(message)
        self.exit_status = exit_status
        self.stderr = stderr
        self.cleanup_report = cleanup_report
