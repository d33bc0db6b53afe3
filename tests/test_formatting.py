from __future__ import annotations

import pytest

from ytdlp_hq.utils.formatting import format_command, format_duration, format_size


@pytest.mark.parametrize(
    ("num_bytes", "text"),
    [(0, "0 B"), (512, "512 B"), (1536, "1.5 KB"), (5 * 1024**3, "5.0 GB")],
)
def test_format_size(num_bytes: int, text: str) -> None:
    assert format_size(num_bytes) == text


@pytest.mark.parametrize(
    ("seconds", "text"),
    [(4.24, "4.2s"), (187, "3m 07s"), (3729, "1h 02m 09s")],
)
def test_format_duration(seconds: float, text: str) -> None:
    assert format_duration(seconds) == text


def test_format_command_quotes_arguments() -> None:
    args = ["ffmpeg", "-i", "my video.mp4", "My_Video.mp4"]
    assert format_command(args) == "ffmpeg -i 'my video.mp4' My_Video.mp4"
