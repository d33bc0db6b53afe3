"""
Host Platform Layer.

Resolves the canonical platform tag and the distribution family of the host.
"""

from .platform_resolver import (
    current_platform_tag,
    detect_distro_family,
    resolve_platform_tag,
)

__all__ = ["current_platform_tag", "detect_distro_family", "resolve_platform_tag"]
