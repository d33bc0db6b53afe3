"""
Helpers for turning sizes, durations and command lines into display strings.
"""

import shlex
from collections.abc import Sequence

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: float) -> str:
    """'1.4 GB' style size for the summary panel."""
    if num_bytes <= 0:
        return "0 B"
    unit = 0
    while num_bytes >= 1024 and unit < len(_SIZE_UNITS) - 1:
        num_bytes /= 1024
        unit += 1
    if unit == 0:
        return f"{int(num_bytes)} B"
    return f"{num_bytes:.1f} {_SIZE_UNITS[unit]}"


def format_duration(seconds: float) -> str:
    """
    Formats elapsed wall time. Runs shorter than a minute keep one decimal
    ('4.2s'); longer ones are shown as '3m 07s' or '1h 02m 09s'.
    """
    if seconds < 60:
        return f"{max(seconds, 0.0):.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    return f"{minutes}m {secs:02d}s"


def format_command(args: Sequence[str]) -> str:
    """Shell-quoted command line, for debug logs only."""
    return shlex.join(str(arg) for arg in args)
