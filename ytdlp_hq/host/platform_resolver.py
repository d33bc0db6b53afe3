"""
Maps the runtime's operating system identifier to a canonical platform tag and
detects the distribution family of Unix-like hosts.
"""

import logging
import sys
from pathlib import Path

from ytdlp_hq.exceptions import UnsupportedPlatformError
from ytdlp_hq.models.host import DistroFamily, PlatformTag

log = logging.getLogger(__name__)

_PLATFORM_ALIASES = {
    "win32": PlatformTag.WINDOWS,
    "windows": PlatformTag.WINDOWS,
    "darwin": PlatformTag.MACOS,
    "macos": PlatformTag.MACOS,
    "linux": PlatformTag.LINUX,
}

_OS_RELEASE_KEYWORDS = (
    (DistroFamily.DEBIAN, ("debian", "ubuntu")),
    (DistroFamily.RHEL, ("rhel", "fedora", "centos")),
)

_MARKER_FILES = (
    (DistroFamily.DEBIAN, "etc/debian_version"),
    (DistroFamily.RHEL, "etc/redhat-release"),
)


def resolve_platform_tag(os_identifier: str) -> PlatformTag:
    """
    Returns the canonical platform tag for an OS identifier such as
    `sys.platform` ("win32", "darwin", "linux") or `platform.system()`.

    Raises:
        UnsupportedPlatformError: For anything other than windows, macOS or linux.
    """
    key = (os_identifier or "").strip().lower()
    if key.startswith("linux"):
        key = "linux"
    try:
        return _PLATFORM_ALIASES[key]
    except KeyError:
        raise UnsupportedPlatformError(f"Unsupported OS: {os_identifier}") from None


def current_platform_tag() -> PlatformTag:
    return resolve_platform_tag(sys.platform)


def detect_distro_family(platform_tag: PlatformTag, root: Path = Path("/")) -> DistroFamily:
    """
    Determines the package-management family of the host.

    Checks /etc/os-release first, then distribution marker files. macOS maps to
    the darwin family. Anything inconclusive is reported as unknown.
    """
    if platform_tag is PlatformTag.MACOS:
        return DistroFamily.DARWIN
    if platform_tag is not PlatformTag.LINUX:
        return DistroFamily.UNKNOWN

    os_release = root / "etc" / "os-release"
    try:
        content = os_release.read_text(encoding="utf-8", errors="replace").lower()
    except OSError as e:
        log.debug(f"Could not read {os_release}: {e}")
        content = ""

    for family, keywords in _OS_RELEASE_KEYWORDS:
        if any(keyword in content for keyword in keywords):
            return family

    for family, marker in _MARKER_FILES:
        if (root / marker).exists():
            return family

    log.debug("Could not determine Linux distribution family.")
    return DistroFamily.UNKNOWN
