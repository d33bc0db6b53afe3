"""
Removes the temporary stream files of a run.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ytdlp_hq.models.results import CleanupEntry, CleanupReport, CleanupStatus

log = logging.getLogger(__name__)


class CleanupManager:
    """
    Attempts to remove every given path and records what happened.

    Missing files are not errors. Failures are recorded in the report and never
    raised, so cleanup can run after any kind of abort.
    """

    def __init__(self, run_logger=None):
        self.run_logger = run_logger

    def cleanup(self, paths: Iterable[Path]) -> CleanupReport:
        log.info("Cleaning up...")
        report = CleanupReport()
        for path in paths:
            path = Path(path)
            try:
                os.remove(path)
            except FileNotFoundError:
                log.info(f"File not found: {path.name}")
                report.entries.append(CleanupEntry(path, CleanupStatus.NOT_FOUND))
            except OSError as e:
                log.error(f"[red]Error removing {path.name}:[/red] {e}")
                report.entries.append(CleanupEntry(path, CleanupStatus.ERRORED, str(e)))
            else:
                log.info(f"Removed: {path.name}")
                report.entries.append(CleanupEntry(path, CleanupStatus.REMOVED))

        log.info(report.summary())
        if self.run_logger:
            self.run_logger.cleanup_completed(
                report.removed_count, report.not_found_count, report.error_count
            )
        return report
