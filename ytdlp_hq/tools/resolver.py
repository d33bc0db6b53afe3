"""
Ensures yt-dlp and FFmpeg are reachable, provisioning them when they are not.
"""

import logging
from collections.abc import Callable

from ytdlp_hq.models.host import HostEnvironment
from ytdlp_hq.models.tools import (
    DOWNLOADER,
    TRANSCODER,
    YT_DLP_VERSION,
    ResolvedTool,
    ToolSource,
    ToolSpec,
)
from ytdlp_hq.tools.probe import DownloaderProbe, ToolProbe, TranscoderProbe
from ytdlp_hq.tools.provisioning import (
    BinaryFetcher,
    DirectFetchStrategy,
    PackageManagerStrategy,
    ProvisioningStrategy,
    select_strategy,
)
from ytdlp_hq.tools.runner import CommandRunner

log = logging.getLogger(__name__)

RunnerFactory = Callable[[HostEnvironment], CommandRunner]


class ToolResolver:
    """
    Probes a tool, provisions it once if the probe fails, and returns the name
    to invoke it by together with the (possibly extended) host environment.
    """

    def __init__(
        self,
        fetch_strategy: ProvisioningStrategy | None = None,
        package_strategy: ProvisioningStrategy | None = None,
        probes: dict[str, ToolProbe] | None = None,
        runner_factory: RunnerFactory = CommandRunner.for_host,
        tool_logger=None,
    ):
        self.fetch_strategy = fetch_strategy or DirectFetchStrategy(
            BinaryFetcher(), YT_DLP_VERSION
        )
        self.package_strategy = package_strategy or PackageManagerStrategy()
        self.probes: dict[str, ToolProbe] = {
            DOWNLOADER.logical_name: DownloaderProbe(),
            TRANSCODER.logical_name: TranscoderProbe(),
            **(probes or {}),
        }
        self.runner_factory = runner_factory
        self.tool_logger = tool_logger

    def _probe_for(self, spec: ToolSpec) -> ToolProbe:
        return self.probes.get(spec.logical_name, DownloaderProbe())

    async def is_present(self, spec: ToolSpec, host: HostEnvironment) -> bool:
        invocation = spec.system_invocation(host.platform_tag)
        return await self._probe_for(spec).is_available(
            invocation, self.runner_factory(host)
        )

    async def ensure_available(self, spec: ToolSpec, host: HostEnvironment) -> ResolvedTool:
        """
        Returns the invocation name for `spec`, provisioning it if needed.

        Raises:
            DownloadFetchError: If fetching the release binary fails.
            ManualInstallRequiredError: If the tool must be installed by hand.
            ToolInstallError: If the package manager fails.
        """
        present = await self.is_present(spec, host)
        if self.tool_logger:
            self.tool_logger.probed(spec.logical_name, spec.system_name, present)

        if present:
            log.debug(f"{spec.system_name} found on the search path.")
            return ResolvedTool(
                spec, spec.system_invocation(host.platform_tag), ToolSource.SYSTEM, host
            )

        log.info(f"[yellow]{spec.system_name} not found. Provisioning...[/yellow]")
        strategy = select_strategy(
            spec, host.platform_tag, self.fetch_strategy, self.package_strategy
        )
        invocation = await strategy.provision(spec, host, self.runner_factory(host))

        updated_host = host.with_directory_prepended(host.work_dir)
        if updated_host is not host:
            log.info("PATH updated")
        if self.tool_logger:
            self.tool_logger.provisioned(spec.logical_name, invocation)
        return ResolvedTool(spec, invocation, ToolSource.PROVISIONED, updated_host)
