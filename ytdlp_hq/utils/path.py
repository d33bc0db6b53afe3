"""
Utilities for turning yt-dlp's reported filename into the final output name.
"""

import re

from pathvalidate import sanitize_filename

_LAST_EXTENSION = re.compile(r"\.(?=[^.]+$)")
_WHITESPACE = re.compile(r"\s+")

FALLBACK_TITLE = "output"


def derive_title(filename: str) -> str:
    """
    Removes the extension after the last period and replaces every whitespace
    run with an underscore.

    >>> derive_title("some text goes here.mp3")
    'some_text_goes_here'
    """
    name_part = _LAST_EXTENSION.split(filename, maxsplit=1)[0]
    return _WHITESPACE.sub("_", name_part)


def build_output_filename(title: str, ext: str = "mp4") -> str:
    """Returns a filesystem-safe `<title>.<ext>`."""
    safe_title = sanitize_filename(title, platform="auto") or FALLBACK_TITLE
    return f"{safe_title}.{ext}"
