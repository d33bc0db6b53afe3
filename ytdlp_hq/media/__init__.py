"""
Media Processing Layer.

This package is responsible for the per-run media work: choosing streams,
downloading them, merging them, and removing the temporary files.
"""

from .cleanup import CleanupManager
from .downloader import DownloadExecutor
from .formats import FormatSelector
from .merger import MergePipeline

__all__ = ["CleanupManager", "DownloadExecutor", "FormatSelector", "MergePipeline"]
