"""
Data Models Layer.

This package contains the configuration model, the host and tool descriptions,
and the per-run value objects passed between pipeline stages.
"""

from .config import AUDIO_IDS, VIDEO_IDS, PipelineConfig
from .host import DistroFamily, HostEnvironment, PlatformTag
from .results import (
    CleanupReport,
    CleanupStatus,
    CommandResult,
    DownloadOutcome,
    DownloadResult,
    MergeJob,
    RunSummary,
    StreamRequest,
    StreamRole,
)
from .tools import DOWNLOADER, TRANSCODER, ResolvedTool, ToolSource, ToolSpec

__all__ = [
    "AUDIO_IDS",
    "DOWNLOADER",
    "TRANSCODER",
    "VIDEO_IDS",
    "CleanupReport",
    "CleanupStatus",
    "CommandResult",
    "DistroFamily",
    "DownloadOutcome",
    "DownloadResult",
    "HostEnvironment",
    "MergeJob",
    "PipelineConfig",
    "PlatformTag",
    "ResolvedTool",
    "RunSummary",
    "StreamRequest",
    "StreamRole",
    "ToolSource",
    "ToolSpec",
]
