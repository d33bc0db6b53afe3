from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from ytdlp_hq import __version__
from ytdlp_hq.cli import app as app_module
from ytdlp_hq.cli.progress_manager import StageProgress
from ytdlp_hq.exceptions import DownloadFailure
from ytdlp_hq.models.host import PlatformTag
from ytdlp_hq.models.results import (
    CleanupReport,
    DownloadOutcome,
    DownloadResult,
    RunSummary,
    StreamRequest,
    StreamRole,
)

runner = CliRunner()
URL = "https://www.youtube.com/watch?v=abc123"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(app_module, "CONFIG_FILE", config_dir / "config.ini")
    monkeypatch.setattr(app_module, "LOG_DIR", config_dir / "logs")
    monkeypatch.setattr(app_module, "current_platform_tag", lambda: PlatformTag.LINUX)
    return config_dir


def _fake_pipeline(monkeypatch, summary: RunSummary) -> list:
    seen = []

    class FakePipelineRunner:
        def __init__(self, config, host, resolver=None, stages=None, log_dir=None):
            seen.append((config, host))

        async def run(self, url):
            seen.append(url)
            return summary

    monkeypatch.setattr(app_module, "PipelineRunner", FakePipelineRunner)
    return seen


def test_version() -> None:
    result = runner.invoke(app_module.app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_download_success(tmp_path: Path, monkeypatch) -> None:
    output = tmp_path / "My_Video.mp4"
    output.write_bytes(b"merged")
    seen = _fake_pipeline(monkeypatch, RunSummary(0, output_path=output, cleanup_report=CleanupReport()))

    result = runner.invoke(
        app_module.app,
        ["download", URL, "-a", "140", "-v", "605", "--work-dir", str(tmp_path)],
    )

    assert result.exit_code == 0, result.output
    config, host = seen[0]
    assert (config.audio_id, config.video_id) == ("140", "605")
    assert config.source_url == URL
    assert host.work_dir == tmp_path.resolve()
    assert seen[1] == URL
    assert "My_Video.mp4" in result.output


def test_download_failure_shows_format_listing(tmp_path: Path, monkeypatch) -> None:
    request = StreamRequest(StreamRole.VIDEO, "136", "mp4")
    download = DownloadResult(
        request,
        1,
        "",
        "Requested format is not available",
        DownloadOutcome.FORMAT_UNAVAILABLE,
        format_listing="[info] Available formats for abc123:\n605 mp4 640x360",
    )
    summary = RunSummary(
        1,
        cleanup_report=CleanupReport(),
        error=DownloadFailure("Video ID 136 is not available.", download),
    )
    _fake_pipeline(monkeypatch, summary)

    result = runner.invoke(app_module.app, ["download", URL, "--work-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Available formats for abc123" in result.output
    assert "DownloadFailure" in result.output


def test_download_rejects_missing_work_dir(tmp_path: Path, monkeypatch) -> None:
    seen = _fake_pipeline(monkeypatch, RunSummary(0))

    result = runner.invoke(
        app_module.app, ["download", URL, "--work-dir", str(tmp_path / "missing")]
    )

    assert result.exit_code == 1
    assert seen == []


def test_cleanup_command_removes_leftovers(tmp_path: Path) -> None:
    (tmp_path / "my_audio.m4a").write_bytes(b"a")
    (tmp_path / "my_video.mp4").write_bytes(b"v")

    result = runner.invoke(app_module.app, ["cleanup", "--work-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert not (tmp_path / "my_audio.m4a").exists()
    assert not (tmp_path / "my_video.mp4").exists()
    assert "2 removed" in result.output


def test_init_writes_default_config(isolated_config: Path) -> None:
    result = runner.invoke(app_module.app, ["init", "--force"])

    assert result.exit_code == 0
    text = (isolated_config / "config.ini").read_text(encoding="utf-8")
    assert "audio_id = 139" in text
    assert "video_id = 136" in text


def test_stage_progress_records_finished_stages() -> None:
    console = Console(file=io.StringIO(), width=80)
    with StageProgress(console) as stages:
        with stages.stage("Downloading audio stream"):
            pass
        with pytest.raises(RuntimeError), stages.stage("Merging streams with FFmpeg"):
            raise RuntimeError("ffmpeg crashed")

    assert stages.completed_stages == ["Downloading audio stream"]


def test_root_verbosity_and_video_id_flags_are_distinct(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(app_module.log, "level", app_module.log.level)
    seen = _fake_pipeline(monkeypatch, RunSummary(0, cleanup_report=CleanupReport()))

    result = runner.invoke(
        app_module.app,
        ["-VV", "download", URL, "-v", "606", "--work-dir", str(tmp_path)],
    )

    assert result.exit_code == 0, result.output
    config, _ = seen[0]
    assert config.video_id == "606"
    assert app_module.log.level == logging.DEBUG
