"""
Validates yt-dlp format IDs and maps them to a stream role.
"""

from ytdlp_hq.exceptions import InvalidFormatIdentifierError
from ytdlp_hq.models.config import AUDIO_IDS, VIDEO_IDS
from ytdlp_hq.models.results import StreamRequest, StreamRole

CONTAINER_EXTENSIONS = {
    StreamRole.AUDIO: "m4a",
    StreamRole.VIDEO: "mp4",
}


class FormatSelector:
    """
    Classifies format IDs against the static audio and video sets.

    This never asks yt-dlp whether the ID is offered for a given source; that is
    only discovered when the download runs.
    """

    def __init__(
        self,
        audio_ids: tuple[str, ...] = AUDIO_IDS,
        video_ids: tuple[str, ...] = VIDEO_IDS,
    ):
        overlap = set(audio_ids) & set(video_ids)
        if overlap:
            raise ValueError(f"Audio and video ID sets overlap: {sorted(overlap)}")
        self.audio_ids = audio_ids
        self.video_ids = video_ids

    def classify(self, format_identifier: str) -> tuple[StreamRole, str]:
        """
        Returns (role, container extension) for a format ID.

        Raises:
            InvalidFormatIdentifierError: If the ID is in neither set.
        """
        key = str(format_identifier).strip()
        if key in self.audio_ids:
            role = StreamRole.AUDIO
        elif key in self.video_ids:
            role = StreamRole.VIDEO
        else:
            raise InvalidFormatIdentifierError(
                f"Invalid format ID {key!r}. Enter {', '.join(self.audio_ids)} (audio)"
                f" or {', '.join(self.video_ids)} (video)"
            )
        return role, CONTAINER_EXTENSIONS[role]

    def request_for(
        self, format_identifier: str, expected_role: StreamRole | None = None
    ) -> StreamRequest:
        """Builds a StreamRequest, optionally insisting on a particular role."""
        role, ext = self.classify(format_identifier)
        if expected_role is not None and role is not expected_role:
            raise InvalidFormatIdentifierError(
                f"Format ID {format_identifier!r} is a {role.value} stream, but a"
                f" {expected_role.value} ID was expected."
            )
        return StreamRequest(role, str(format_identifier).strip(), ext)
