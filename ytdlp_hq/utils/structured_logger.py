"""
Structured logging system for better log analysis and debugging.
Provides JSON-formatted logs with context and metadata.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any


class StructuredLogger:
    """
    Logger that outputs both human-readable and machine-parseable logs.

    Usage:
        logger = StructuredLogger("ytdlp_hq", log_dir=Path("logs"))
        logger.info("stream_download_completed", role="audio", file="my_audio.m4a")
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
            enable_console: Enable console output
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)

        # The file itself is opened on the first event
        self._json_file = None
        self._closed = False
        self.json_log_path: Path | None = None
        if self.enable_json:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.json_log_path = log_dir / f"ytdlp_hq_{timestamp}.jsonl"

        # Session context (added to all log entries)
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
            "start_time": datetime.now().isoformat(),
        }

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all logs."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        parts = [f"\\[{event}]"]
        for key, value in context.items():
            parts.append(f"{key}={value}")
        return " ".join(parts)

    def _open_json_file(self):
        if self._json_file is None and not self._closed:
            self.json_log_path.parent.mkdir(parents=True, exist_ok=True)
            self._json_file = open(self.json_log_path, "a", encoding="utf-8")  # noqa: SIM115
        return self._json_file

    def _write_json(self, level: str, event: str, **context) -> None:
        if self._closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            json_file = self._open_json_file()
            json_file.write(json.dumps(entry, default=str) + "\n")
            json_file.flush()
        except OSError as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _emit(self, level: int, event: str, **context) -> None:
        if self.enable_console:
            self._logger.log(level, self._format_message(event, **context))
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        self._emit(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        self._emit(logging.INFO, event, **context)

    def warning(self, event: str, **context) -> None:
        self._emit(logging.WARNING, event, **context)

    def error(self, event: str, **context) -> None:
        self._emit(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close JSON log file. Later events are no longer written to it."""
        self._closed = True
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ToolLogger:
    """Events about probing and provisioning external tools."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def probed(self, tool: str, invocation: str, present: bool):
        self.logger.debug("tool_probed", tool=tool, invocation=invocation, present=present)

    def provisioned(self, tool: str, invocation: str):
        self.logger.info("tool_provisioned", tool=tool, invocation=invocation)


class StreamLogger:
    """Events for individual stream downloads."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def started(self, role: str, format_id: str, output_file: str):
        self.logger.debug(
            "stream_download_started",
            role=role,
            format_id=format_id,
            output_file=output_file,
        )

    def completed(self, role: str, output_file: str):
        self.logger.debug("stream_download_completed", role=role, output_file=output_file)

    def failed(self, role: str, outcome: str, exit_status: int, error: str):
        self.logger.error(
            "stream_download_failed",
            role=role,
            outcome=outcome,
            exit_status=exit_status,
            error=error[:500],
        )


class RunLogger:
    """Events for the run as a whole."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def run_started(self, source_url: str, audio_id: str, video_id: str, platform: str):
        self.logger.debug(
            "run_started",
            source_url=source_url,
            audio_id=audio_id,
            video_id=video_id,
            platform=platform,
        )

    def merge_completed(self, output_file: str, title: str):
        self.logger.debug("merge_completed", output_file=output_file, title=title)

    def merge_failed(self, output_file: str, exit_status: int):
        self.logger.error("merge_failed", output_file=output_file, exit_status=exit_status)

    def cleanup_completed(self, removed: int, not_found: int, errors: int):
        self.logger.debug(
            "cleanup_completed", removed=removed, not_found=not_found, errors=errors
        )

    def run_completed(self, exit_code: int, duration_s: float, output_file: str | None):
        self.logger.debug(
            "run_completed",
            exit_code=exit_code,
            duration_s=round(duration_s, 2),
            output_file=output_file,
        )


def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, ToolLogger, StreamLogger, RunLogger]:
    """
    Create all structured loggers.

    Returns:
        Tuple of (base_logger, tool_logger, stream_logger, run_logger)
    """
    base = StructuredLogger("ytdlp_hq.events", log_dir=log_dir, enable_json=enable_json)
    return base, ToolLogger(base), StreamLogger(base), RunLogger(base)
