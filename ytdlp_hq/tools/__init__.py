"""
External Tools Layer.

This package probes, provisions, and runs the yt-dlp and FFmpeg executables.
"""

from .probe import DownloaderProbe, ToolProbe, TranscoderProbe
from .provisioning import BinaryFetcher, DirectFetchStrategy, PackageManagerStrategy
from .resolver import ToolResolver
from .runner import CommandRunner

__all__ = [
    "BinaryFetcher",
    "CommandRunner",
    "DirectFetchStrategy",
    "DownloaderProbe",
    "PackageManagerStrategy",
    "ToolProbe",
    "ToolResolver",
    "TranscoderProbe",
]
