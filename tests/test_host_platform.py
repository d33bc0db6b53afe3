from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_os_root
from ytdlp_hq.exceptions import UnsupportedPlatformError
from ytdlp_hq.host import detect_distro_family, resolve_platform_tag
from ytdlp_hq.models.host import DistroFamily, HostEnvironment, PlatformTag


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("win32", PlatformTag.WINDOWS),
        ("Windows", PlatformTag.WINDOWS),
        ("darwin", PlatformTag.MACOS),
        ("Darwin", PlatformTag.MACOS),
        ("linux", PlatformTag.LINUX),
        ("Linux", PlatformTag.LINUX),
        ("linux2", PlatformTag.LINUX),
    ],
)
def test_resolve_platform_tag_supported(identifier: str, expected: PlatformTag) -> None:
    assert resolve_platform_tag(identifier) is expected


@pytest.mark.parametrize("identifier", ["freebsd13", "cygwin", "aix", "sunos5", ""])
def test_resolve_platform_tag_rejects_everything_else(identifier: str) -> None:
    with pytest.raises(UnsupportedPlatformError):
        resolve_platform_tag(identifier)


def test_os_release_ubuntu_is_debian(tmp_path: Path) -> None:
    root = make_os_root(tmp_path, 'NAME="Ubuntu"\nID=ubuntu\nID_LIKE=debian\n')
    assert detect_distro_family(PlatformTag.LINUX, root) is DistroFamily.DEBIAN


def test_os_release_fedora_is_rhel(tmp_path: Path) -> None:
    root = make_os_root(tmp_path, 'NAME="Fedora Linux"\nID=fedora\n')
    assert detect_distro_family(PlatformTag.LINUX, root) is DistroFamily.RHEL


def test_marker_files_are_the_fallback(tmp_path: Path) -> None:
    root = make_os_root(tmp_path, "ID=custom\n", markers=("debian_version",))
    assert detect_distro_family(PlatformTag.LINUX, root) is DistroFamily.DEBIAN

    other = make_os_root(tmp_path / "other", None, markers=("redhat-release",))
    assert detect_distro_family(PlatformTag.LINUX, other) is DistroFamily.RHEL


def test_inconclusive_linux_is_unknown(tmp_path: Path) -> None:
    root = make_os_root(tmp_path, 'NAME="Arch Linux"\nID=arch\n')
    assert detect_distro_family(PlatformTag.LINUX, root) is DistroFamily.UNKNOWN


def test_macos_and_windows_families(tmp_path: Path) -> None:
    assert detect_distro_family(PlatformTag.MACOS, tmp_path) is DistroFamily.DARWIN
    assert detect_distro_family(PlatformTag.WINDOWS, tmp_path) is DistroFamily.UNKNOWN


def test_prepending_work_dir_is_idempotent(linux_host: HostEnvironment) -> None:
    updated = linux_host.with_directory_prepended(linux_host.work_dir)
    assert updated.search_path[0] == str(linux_host.work_dir)
    assert updated.search_path[1:] == linux_host.search_path
    # The original snapshot is untouched
    assert str(linux_host.work_dir) not in linux_host.search_path

    again = updated.with_directory_prepended(linux_host.work_dir)
    assert again is updated
    assert again.search_path.count(str(linux_host.work_dir)) == 1


def test_path_value_uses_platform_separator(tmp_path: Path) -> None:
    windows = HostEnvironment(PlatformTag.WINDOWS, ("C:\\tools", "C:\\bin"), tmp_path)
    assert windows.path_value == "C:\\tools;C:\\bin"

    linux = HostEnvironment(PlatformTag.LINUX, ("/usr/bin", "/bin"), tmp_path)
    assert linux.path_value == "/usr/bin:/bin"
    assert linux.subprocess_env()["PATH"] == "/usr/bin:/bin"


def test_from_process_reads_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PATH", "/opt/bin:/usr/bin:")
    host = HostEnvironment.from_process(PlatformTag.LINUX, tmp_path)
    assert host.search_path == ("/opt/bin", "/usr/bin")
    assert host.work_dir == tmp_path
