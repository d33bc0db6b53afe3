"""
Pydantic model for application configuration, plus the static format tables.
"""

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from ytdlp_hq.models.tools import YT_DLP_RELEASE_BASE_URL, YT_DLP_VERSION

# Known-good yt-dlp format IDs, in order of preference
AUDIO_IDS: tuple[str, ...] = ("139", "140", "140-drc")
VIDEO_IDS: tuple[str, ...] = ("136", "605", "606")

DEFAULT_AUDIO_ID = AUDIO_IDS[0]
DEFAULT_VIDEO_ID = VIDEO_IDS[0]

_VERSION_PATTERN = re.compile(r"^\d{4}\.\d{2}\.\d{2}(\.\d+)?$")


class PipelineConfig(BaseModel):
    """A validated configuration model for one pipeline run."""

    # Stream selection
    audio_id: str = DEFAULT_AUDIO_ID
    video_id: str = DEFAULT_VIDEO_ID

    # Tool provisioning
    downloader_version: str = YT_DLP_VERSION
    release_base_url: str = YT_DLP_RELEASE_BASE_URL

    # Run behaviour
    work_dir: Path = Field(default_factory=Path.cwd)
    json_log: bool = False

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)
    source_url: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("downloader_version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """yt-dlp release tags are dates, optionally with a build suffix."""
        if not _VERSION_PATTERN.match(v):
            raise ValueError(
                f"Downloader version must look like YYYY.MM.DD, but got: {v!r}"
            )
        return v

    @field_validator("release_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("Release base URL must be an http(s) URL.")
        if "{version}" not in v:
            raise ValueError("Release base URL must contain a {version} placeholder.")
        return v

    @field_validator("work_dir")
    @classmethod
    def validate_work_dir(cls, v: Path) -> Path:
        v = Path(v).expanduser()
        if not v.is_dir():
            raise ValueError(f"Working directory does not exist: {v}")
        return v.resolve()

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "source_url"}
        return {key for key in cls.model_fields if key not in internal_fields}
