"""
Makes a missing tool available: either by fetching a release binary into the
working directory or by installing it with the system package manager.
"""

import asyncio
import logging
import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import aiofiles
import aiohttp

from ytdlp_hq.exceptions import (
    DownloadFetchError,
    ManualInstallRequiredError,
    ToolInstallError,
)
from ytdlp_hq.host.platform_resolver import detect_distro_family
from ytdlp_hq.models.host import DistroFamily, HostEnvironment, PlatformTag
from ytdlp_hq.models.tools import ToolSpec
from ytdlp_hq.tools.runner import CommandRunner

log = logging.getLogger(__name__)


class BinaryFetcher:
    """Streams a release binary to disk and marks it executable."""

    CHUNK_SIZE = 262144  # 256 KB

    def __init__(self, timeout: aiohttp.ClientTimeout | None = None):
        self.timeout = timeout or aiohttp.ClientTimeout(
            total=None, sock_connect=15, sock_read=90
        )

    async def fetch(self, url: str, destination: Path, executable: bool = True) -> Path:
        """
        Downloads `url` to `destination`.

        Raises:
            DownloadFetchError: On a non-success response, a network error, or
                if the binary cannot be written to `destination`.
        """
        try:
            async with (
                aiohttp.ClientSession(timeout=self.timeout) as session,
                session.get(url, allow_redirects=True) as response,
            ):
                if not response.ok:
                    raise DownloadFetchError(
                        f"Failed to download {destination.name}: "
                        f"{response.status} {response.reason}"
                    )
                async with aiofiles.open(destination, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DownloadFetchError(f"Failed to download {destination.name}: {e}") from e
        except OSError as e:
            raise DownloadFetchError(f"Failed to write {destination.name}: {e}") from e

        if executable:
            log.info(f"Make {destination.name} executable...")
            try:
                mode = destination.stat().st_mode
                os.chmod(destination, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            except OSError as e:
                raise DownloadFetchError(
                    f"Failed to make {destination.name} executable: {e}"
                ) from e
        return destination


@dataclass(frozen=True)
class PackageManager:
    """Commands of one package manager, keyed by distribution family."""

    executable: str
    refresh_args: tuple[str, ...]
    privileged: bool

    def _prefix(self) -> list[str]:
        return ["sudo", self.executable] if self.privileged else [self.executable]

    def refresh_command(self) -> list[str]:
        return [*self._prefix(), *self.refresh_args]

    def install_command(self, package: str) -> list[str]:
        if self.privileged:
            return [*self._prefix(), "install", "-y", package]
        return [*self._prefix(), "install", package]


PACKAGE_MANAGERS: dict[DistroFamily, PackageManager] = {
    DistroFamily.DEBIAN: PackageManager("apt", ("update",), privileged=True),
    DistroFamily.RHEL: PackageManager("dnf", ("check-update",), privileged=True),
    DistroFamily.DARWIN: PackageManager("brew", ("update",), privileged=False),
}


class ProvisioningStrategy(ABC):
    """Makes one tool available; returns the invocation name to use afterwards."""

    @abstractmethod
    async def provision(
        self, spec: ToolSpec, host: HostEnvironment, runner: CommandRunner
    ) -> str: ...


class DirectFetchStrategy(ProvisioningStrategy):
    """Fetches the version-pinned release binary into the working directory."""

    def __init__(
        self,
        fetcher: BinaryFetcher,
        version: str,
        base_url: str | None = None,
    ):
        self.fetcher = fetcher
        self.version = version
        self.base_url = base_url

    async def provision(
        self, spec: ToolSpec, host: HostEnvironment, runner: CommandRunner
    ) -> str:
        filename = spec.platform_filename(host.platform_tag)
        url = spec.source_url(host.platform_tag, self.version, self.base_url)
        log.info(f"[cyan]Downloading {spec.system_name} for {host.platform_tag.value}...[/cyan]")
        log.debug(f"Fetching {url}")
        await self.fetcher.fetch(
            url, host.work_dir / filename, executable=spec.requires_execute_bit
        )
        return filename


class PackageManagerStrategy(ProvisioningStrategy):
    """Refreshes the package index and installs the tool's package."""

    def __init__(self, root: Path = Path("/")):
        self.root = root

    async def provision(
        self, spec: ToolSpec, host: HostEnvironment, runner: CommandRunner
    ) -> str:
        family = detect_distro_family(host.platform_tag, self.root)
        manager = PACKAGE_MANAGERS.get(family)
        package = spec.package_names.get(family)
        if manager is None or package is None:
            raise ToolInstallError(
                f"Unsupported Linux distribution; install {spec.system_name} manually."
            )

        log.info(f"[cyan]Installing {package} with {manager.executable}...[/cyan]")
        try:
            refresh = await runner.run(manager.refresh_command())
        except OSError as e:
            raise ToolInstallError(f"Failed to update package list: {e}") from e
        if not refresh.stdout:
            raise ToolInstallError("Failed to update package list")

        try:
            install = await runner.run(manager.install_command(package))
        except OSError as e:
            raise ToolInstallError(f"Failed to install {package}: {e}") from e
        if not install.ok:
            raise ToolInstallError(
                f"Failed to install {package}: {install.stderr.strip() or install.exit_status}"
            )
        return spec.system_invocation(host.platform_tag)


class ManualInstallStrategy(ProvisioningStrategy):
    """For hosts where the tool cannot be installed automatically."""

    async def provision(
        self, spec: ToolSpec, host: HostEnvironment, runner: CommandRunner
    ) -> str:
        guidance = f"Please install {spec.system_name} manually on {host.platform_tag.value}."
        if spec.manual_install_url:
            guidance += f" Visit {spec.manual_install_url} for instructions."
        log.warning(f"[yellow]{guidance}[/yellow]")
        raise ManualInstallRequiredError(guidance)


def select_strategy(
    spec: ToolSpec,
    platform_tag: PlatformTag,
    fetch_strategy: ProvisioningStrategy,
    package_strategy: ProvisioningStrategy,
) -> ProvisioningStrategy:
    """Fetched tools are fetched everywhere; installed tools dispatch on platform."""
    if spec.is_fetched:
        return fetch_strategy
    strategies: dict[PlatformTag, ProvisioningStrategy] = {
        PlatformTag.WINDOWS: ManualInstallStrategy(),
        PlatformTag.MACOS: package_strategy,
        PlatformTag.LINUX: package_strategy,
    }
    return strategies[platform_tag]
