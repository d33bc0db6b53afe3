"""
Runs external programs asynchronously and captures their output.
"""

import asyncio
import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from rich.markup import escape

from ytdlp_hq.models.host import HostEnvironment
from ytdlp_hq.models.results import CommandResult
from ytdlp_hq.utils.formatting import format_command

log = logging.getLogger(__name__)


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


class CommandRunner:
    """
    Launches a program in the working directory with the host's search path and
    waits for it to exit. There is no timeout: a hung tool blocks the caller.
    """

    def __init__(self, cwd: Path | None = None, env: dict[str, str] | None = None):
        self.cwd = cwd
        self.env = env

    @classmethod
    def for_host(cls, host: HostEnvironment) -> "CommandRunner":
        return cls(cwd=host.work_dir, env=host.subprocess_env())

    def resolve_program(self, program: str) -> str:
        """
        Looks a bare program name up on this runner's search path.

        The child's `env` is not consulted when Windows locates the executable,
        so a tool provisioned into the work dir must be spawned by full path.
        Names that cannot be found are returned unchanged.
        """
        if not self.env or "PATH" not in self.env:
            return program
        return shutil.which(program, path=self.env["PATH"]) or program

    async def run(self, args: Sequence[str]) -> CommandResult:
        """
        Runs `args` to completion.

        Raises:
            OSError: If the program cannot be launched at all (e.g. not found).
        """
        log.debug(f"Running: {escape(format_command(args))}")
        program = self.resolve_program(args[0])
        proc = await asyncio.create_subprocess_exec(
            program,
            *args[1:],
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(self.cwd) if self.cwd else None,
            env=self.env,
        )
        stdout, stderr = await proc.communicate()
        result = CommandResult(proc.returncode, _decode(stdout), _decode(stderr))
        log.debug(f"'{args[0]}' exited with code {result.exit_status}")
        return result
