from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import pytest
from aiohttp import test_utils, web

from ytdlp_hq.exceptions import DownloadFetchError
from ytdlp_hq.tools import BinaryFetcher

PAYLOAD = b"#!/bin/sh\necho 2024.09.27\n" * 1000


async def _fetch_from_app(route: str, handler, destination: Path, request_path: str | None = None):
    app = web.Application()
    app.router.add_get(route, handler)
    async with test_utils.TestServer(app) as server:
        url = str(server.make_url(request_path or route))
        return await BinaryFetcher().fetch(url, destination)


def test_fetch_streams_body_to_disk(tmp_path: Path) -> None:
    async def release(request: web.Request) -> web.Response:
        return web.Response(body=PAYLOAD)

    destination = tmp_path / "yt-dlp_linux"
    result = asyncio.run(
        _fetch_from_app("/2024.09.27/yt-dlp_linux", release, destination)
    )

    assert result == destination
    assert destination.read_bytes() == PAYLOAD


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_fetch_sets_execute_bit(tmp_path: Path) -> None:
    async def release(request: web.Request) -> web.Response:
        return web.Response(body=PAYLOAD)

    destination = tmp_path / "yt-dlp_linux"
    asyncio.run(_fetch_from_app("/yt-dlp_linux", release, destination))

    assert os.stat(destination).st_mode & 0o111 == 0o111


def test_http_error_raises_fetch_error(tmp_path: Path) -> None:
    async def release(request: web.Request) -> web.Response:
        return web.Response(body=PAYLOAD)

    destination = tmp_path / "yt-dlp_linux"
    with pytest.raises(DownloadFetchError, match="404"):
        asyncio.run(
            _fetch_from_app("/yt-dlp_linux", release, destination, "/missing/yt-dlp_linux")
        )
    assert not destination.exists()


def test_unreachable_host_raises_fetch_error(tmp_path: Path) -> None:
    fetcher = BinaryFetcher()
    with pytest.raises(DownloadFetchError):
        asyncio.run(fetcher.fetch("http://127.0.0.1:1/yt-dlp_linux", tmp_path / "yt-dlp_linux"))


def test_unwritable_destination_raises_fetch_error(tmp_path: Path) -> None:
    async def release(request: web.Request) -> web.Response:
        return web.Response(body=PAYLOAD)

    destination = tmp_path / "yt-dlp_linux"
    destination.mkdir()
    with pytest.raises(DownloadFetchError, match="Failed to write yt-dlp_linux"):
        asyncio.run(_fetch_from_app("/yt-dlp_linux", release, destination))
    assert destination.is_dir()
