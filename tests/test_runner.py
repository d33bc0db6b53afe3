from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import pytest

from ytdlp_hq.models.host import HostEnvironment, PlatformTag
from ytdlp_hq.tools import CommandRunner

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="shell script tool")


def _install_tool(directory: Path, name: str = "yt-dlp_linux") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    tool = directory / name
    tool.write_text('#!/bin/sh\necho "fetched $1"\n', encoding="utf-8")
    os.chmod(tool, 0o755)
    return tool


@posix_only
def test_provisioned_tool_resolves_to_full_path(tmp_path: Path) -> None:
    work_dir = tmp_path / "work"
    tool = _install_tool(work_dir)
    host = HostEnvironment(PlatformTag.LINUX, ("/usr/bin",), work_dir)
    host = host.with_directory_prepended(work_dir)

    runner = CommandRunner.for_host(host)

    assert runner.resolve_program("yt-dlp_linux") == str(tool)


def test_unknown_or_unscoped_names_are_left_alone(tmp_path: Path) -> None:
    scoped = CommandRunner(env={"PATH": str(tmp_path)})
    assert scoped.resolve_program("no-such-tool") == "no-such-tool"
    assert CommandRunner().resolve_program("yt-dlp") == "yt-dlp"


@posix_only
def test_run_finds_tool_outside_the_working_directory(tmp_path: Path) -> None:
    _install_tool(tmp_path / "bin")
    cwd = tmp_path / "elsewhere"
    cwd.mkdir()
    runner = CommandRunner(cwd=cwd, env={"PATH": str(tmp_path / "bin")})

    result = asyncio.run(runner.run(["yt-dlp_linux", "--version"]))

    assert result.ok
    assert result.stdout == "fetched --version\n"


def test_missing_program_raises_os_error(tmp_path: Path) -> None:
    runner = CommandRunner(cwd=tmp_path, env={"PATH": str(tmp_path)})
    with pytest.raises(OSError):
        asyncio.run(runner.run(["definitely-not-installed-tool"]))
