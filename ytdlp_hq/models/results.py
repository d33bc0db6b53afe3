"""
Per-run value objects passed between pipeline stages.
None of these outlive a single run.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class StreamRole(Enum):
    AUDIO = "audio"
    VIDEO = "video"


class DownloadOutcome(Enum):
    SUCCESS = "success"
    FORMAT_UNAVAILABLE = "format_unavailable"
    OTHER_FAILURE = "other_failure"


class CleanupStatus(Enum):
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    ERRORED = "errored"


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one external process invocation."""

    exit_status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


@dataclass(frozen=True)
class StreamRequest:
    """One stream to fetch: its role, format ID and temp output file."""

    role: StreamRole
    format_identifier: str
    container_extension: str

    @property
    def output_filename(self) -> str:
        return f"my_{self.role.value}.{self.container_extension}"


@dataclass
class DownloadResult:
    """Classified outcome of a single yt-dlp download invocation."""

    request: StreamRequest
    exit_status: int
    captured_stdout: str
    captured_stderr: str
    outcome: DownloadOutcome
    format_listing: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is DownloadOutcome.SUCCESS


@dataclass(frozen=True)
class MergeJob:
    audio_file: Path
    video_file: Path
    derived_title: str
    output_filename: str


@dataclass(frozen=True)
class CleanupEntry:
    path: Path
    status: CleanupStatus
    error: str | None = None


@dataclass
class CleanupReport:
    """Aggregate result of one cleanup pass."""

    entries: list[CleanupEntry] = field(default_factory=list)

    def _count(self, status: CleanupStatus) -> int:
        return sum(1 for entry in self.entries if entry.status is status)

    @property
    def removed_count(self) -> int:
        return self._count(CleanupStatus.REMOVED)

    @property
    def not_found_count(self) -> int:
        return self._count(CleanupStatus.NOT_FOUND)

    @property
    def error_count(self) -> int:
        return self._count(CleanupStatus.ERRORED)

    def status_of(self, path: Path) -> CleanupStatus | None:
        for entry in self.entries:
            if entry.path == path:
                return entry.status
        return None

    def summary(self) -> str:
        return (
            f"Cleanup summary: {self.removed_count} removed, "
            f"{self.not_found_count} not found, {self.error_count} errors"
        )


@dataclass
class RunSummary:
    """Everything the CLI needs to report a finished (or aborted) run."""

    exit_code: int
    output_path: Path | None = None
    cleanup_report: CleanupReport | None = None
    error: Exception | None = None
    duration_s: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def format_listing(self) -> str | None:
        result = getattr(self.error, "result", None)
        return getattr(result, "format_listing", None)
