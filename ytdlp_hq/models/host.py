"""
Describes the host the pipeline runs on: its platform tag and the search path
used to locate executables.
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


class PlatformTag(Enum):
    """Canonical platform tags supported by the pipeline."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"

    @property
    def path_separator(self) -> str:
        return ";" if self is PlatformTag.WINDOWS else ":"


class DistroFamily(Enum):
    """Package-management ecosystem of a Unix-like host."""

    DEBIAN = "debian"
    RHEL = "rhel"
    DARWIN = "darwin"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class HostEnvironment:
    """
    An explicit snapshot of the process environment relevant to tool lookup.

    Instead of mutating os.environ, provisioning returns a new HostEnvironment
    with the working directory prepended to the search path. Subprocesses are
    launched with `subprocess_env()` so the change reaches them.
    """

    platform_tag: PlatformTag
    search_path: tuple[str, ...]
    work_dir: Path
    base_env: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_process(cls, platform_tag: PlatformTag, work_dir: Path) -> "HostEnvironment":
        """Reads the search path of the running process."""
        raw = os.environ.get("PATH", "")
        separator = platform_tag.path_separator
        entries = tuple(p for p in raw.split(separator) if p)
        return cls(platform_tag, entries, work_dir, dict(os.environ))

    @property
    def path_value(self) -> str:
        return self.platform_tag.path_separator.join(self.search_path)

    def includes(self, directory: Path | str) -> bool:
        return str(directory) in self.search_path

    def with_directory_prepended(self, directory: Path | str) -> "HostEnvironment":
        """Returns a copy with `directory` first on the search path (no-op if present)."""
        if self.includes(directory):
            return self
        return replace(self, search_path=(str(directory), *self.search_path))

    def subprocess_env(self) -> dict[str, str]:
        env = dict(self.base_env)
        env["PATH"] = self.path_value
        return env
