from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from ytdlp_hq.models.host import HostEnvironment, PlatformTag
from ytdlp_hq.models.results import CommandResult

Handler = Callable[[list[str]], "CommandResult | BaseException"]


class FakeRunner:
    """Scripted stand-in for CommandRunner; records every invocation."""

    def __init__(self, handler: Handler | None = None):
        self.handler = handler or (lambda args: CommandResult(0))
        self.calls: list[list[str]] = []

    async def run(self, args) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        result = self.handler(args)
        if isinstance(result, BaseException):
            raise result
        return result

    def calls_to(self, program: str) -> list[list[str]]:
        return [call for call in self.calls if call[0] == program]


class RecordingStrategy:
    """Provisioning strategy that only records what it was asked to do."""

    def __init__(self, invocation: str = "yt-dlp_linux"):
        self.invocation = invocation
        self.calls = []

    async def provision(self, spec, host, runner) -> str:
        self.calls.append((spec.logical_name, host))
        return self.invocation


@pytest.fixture
def linux_host(tmp_path: Path) -> HostEnvironment:
    return HostEnvironment(PlatformTag.LINUX, ("/usr/local/bin", "/usr/bin"), tmp_path)


def make_os_root(tmp_path: Path, os_release: str | None = None, markers: tuple[str, ...] = ()) -> Path:
    root = tmp_path / "root"
    (root / "etc").mkdir(parents=True)
    if os_release is not None:
        (root / "etc" / "os-release").write_text(os_release, encoding="utf-8")
    for marker in markers:
        (root / "etc" / marker).write_text("", encoding="utf-8")
    return root
