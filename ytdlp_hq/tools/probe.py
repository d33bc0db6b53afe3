"""
Capability checks that decide whether a tool is reachable.
"""

import logging
from abc import ABC, abstractmethod

from ytdlp_hq.tools.runner import CommandRunner

log = logging.getLogger(__name__)


class ToolProbe(ABC):
    """Decides whether an invocation name refers to a usable tool."""

    @abstractmethod
    async def is_available(self, invocation: str, runner: CommandRunner) -> bool:
        """Returns True if the tool can be run through `invocation`."""


class FlagProbe(ToolProbe):
    """
    Runs the tool with a harmless flag. A zero exit status means present; any
    failure to launch it is treated the same as a non-zero exit.
    """

    flag: str = "--help"

    async def is_available(self, invocation: str, runner: CommandRunner) -> bool:
        try:
            result = await runner.run([invocation, self.flag])
        except OSError as e:
            log.debug(f"Probe '{invocation} {self.flag}' could not run: {e}")
            return False
        return result.ok


class DownloaderProbe(FlagProbe):
    flag = "--version"


class TranscoderProbe(FlagProbe):
    flag = "-version"
