from __future__ import annotations

import pytest

from ytdlp_hq.exceptions import InvalidFormatIdentifierError
from ytdlp_hq.media.formats import FormatSelector
from ytdlp_hq.models.config import AUDIO_IDS, VIDEO_IDS
from ytdlp_hq.models.results import StreamRole


@pytest.mark.parametrize("format_id", AUDIO_IDS)
def test_audio_ids_classify_as_m4a(format_id: str) -> None:
    assert FormatSelector().classify(format_id) == (StreamRole.AUDIO, "m4a")


@pytest.mark.parametrize("format_id", VIDEO_IDS)
def test_video_ids_classify_as_mp4(format_id: str) -> None:
    assert FormatSelector().classify(format_id) == (StreamRole.VIDEO, "mp4")


@pytest.mark.parametrize("format_id", ["137", "", "bestaudio", "140-DRC", "22"])
def test_unknown_ids_are_rejected(format_id: str) -> None:
    with pytest.raises(InvalidFormatIdentifierError) as excinfo:
        FormatSelector().classify(format_id)
    message = str(excinfo.value)
    assert "139, 140, 140-drc (audio)" in message
    assert "136, 605, 606 (video)" in message


def test_request_for_builds_temp_filename() -> None:
    selector = FormatSelector()
    audio = selector.request_for("140-drc", StreamRole.AUDIO)
    video = selector.request_for("606", StreamRole.VIDEO)
    assert audio.output_filename == "my_audio.m4a"
    assert video.output_filename == "my_video.mp4"
    assert audio.format_identifier == "140-drc"


def test_request_for_rejects_role_mismatch() -> None:
    selector = FormatSelector()
    with pytest.raises(InvalidFormatIdentifierError):
        selector.request_for("136", StreamRole.AUDIO)
    with pytest.raises(InvalidFormatIdentifierError):
        selector.request_for("139", StreamRole.VIDEO)


def test_overlapping_id_sets_are_refused() -> None:
    with pytest.raises(ValueError):
        FormatSelector(audio_ids=("139", "136"), video_ids=("136",))
