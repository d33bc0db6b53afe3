"""
Static descriptions of the external tools the pipeline drives.
"""

from dataclasses import dataclass, field
from enum import Enum

from ytdlp_hq.models.host import DistroFamily, HostEnvironment, PlatformTag

YT_DLP_VERSION = "2024.09.27"
YT_DLP_RELEASE_BASE_URL = "https://github.com/yt-dlp/yt-dlp/releases/download/{version}/"
FFMPEG_DOWNLOAD_PAGE = "https://ffmpeg.org/download.html"


class ToolSource(Enum):
    """Where the invocation name of a resolved tool comes from."""

    SYSTEM = "system"
    PROVISIONED = "provisioned"


@dataclass(frozen=True)
class ToolSpec:
    """Immutable description of one external tool."""

    logical_name: str
    system_name: str
    platform_filenames: dict[PlatformTag, str] = field(default_factory=dict)
    source_url_template: str | None = None
    requires_execute_bit: bool = False
    package_names: dict[DistroFamily, str] = field(default_factory=dict)
    manual_install_url: str | None = None

    @property
    def is_fetched(self) -> bool:
        """True for tools fetched as a binary rather than installed by a package manager."""
        return self.source_url_template is not None

    def system_invocation(self, platform_tag: PlatformTag) -> str:
        if platform_tag is PlatformTag.WINDOWS:
            return f"{self.system_name}.exe"
        return self.system_name

    def platform_filename(self, platform_tag: PlatformTag) -> str:
        return self.platform_filenames.get(platform_tag, self.system_invocation(platform_tag))

    def source_url(self, platform_tag: PlatformTag, version: str, base_url: str | None = None) -> str:
        if self.source_url_template is None:
            raise ValueError(f"{self.logical_name} is not fetched from a release host.")
        base = (base_url or self.source_url_template).format(version=version)
        if not base.endswith("/"):
            base += "/"
        return f"{base}{self.platform_filename(platform_tag)}"


DOWNLOADER = ToolSpec(
    logical_name="downloader",
    system_name="yt-dlp",
    platform_filenames={
        PlatformTag.WINDOWS: "yt-dlp.exe",
        PlatformTag.MACOS: "yt-dlp_macos",
        PlatformTag.LINUX: "yt-dlp_linux",
    },
    source_url_template=YT_DLP_RELEASE_BASE_URL,
    requires_execute_bit=True,
)

TRANSCODER = ToolSpec(
    logical_name="transcoder",
    system_name="ffmpeg",
    package_names={
        DistroFamily.DEBIAN: "ffmpeg",
        DistroFamily.RHEL: "ffmpeg-free",
        DistroFamily.DARWIN: "ffmpeg",
    },
    manual_install_url=FFMPEG_DOWNLOAD_PAGE,
)


@dataclass(frozen=True)
class ResolvedTool:
    """The outcome of ToolResolver.ensure_available for one tool."""

    spec: ToolSpec
    invocation: str
    source: ToolSource
    host: HostEnvironment

    @property
    def provisioned(self) -> bool:
        return self.source is ToolSource.PROVISIONED
