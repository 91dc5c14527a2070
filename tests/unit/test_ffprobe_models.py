"""Tests for parsed ffprobe metadata models."""

from fractions import Fraction

import pytest
from pydantic import ValidationError

from mediaprobe.parsers.ffprobe_models import (
    AudioStreamInfo,
    FFProbeMetadata,
    Validity,
    VideoStreamInfo,
)


def _record(**video_fields) -> FFProbeMetadata:
    return FFProbeMetadata(video=VideoStreamInfo(**video_fields))


class TestAspectRatios:
    """Tests for derived aspect ratio queries."""

    def test_from_display_aspect_ratio(self):
        """Test aspect ratio taken from DAR."""
        record = _record(display_aspect_ratio="4:3", width=1920, height=1080)
        assert record.aspect_from_dar() == pytest.approx(4 / 3)
        assert record.calculated_aspect_ratio() == pytest.approx(4 / 3)

    def test_zero_dar_falls_back_to_dimensions(self):
        """Test that a 0:1 DAR is ignored."""
        record = _record(display_aspect_ratio="0:1", width=1920, height=1080)

        assert record.aspect_from_dar() is None
        assert record.calculated_aspect_ratio() == pytest.approx(1920 / 1080)

    def test_missing_dar_falls_back_to_dimensions(self):
        """Test fallback when DAR is absent."""
        record = _record(width=1920, height=1080)
        assert record.calculated_aspect_ratio() == pytest.approx(1.7777777)

    @pytest.mark.parametrize("ratio", ["N/A", "16", "16:0", "a:b", ""])
    def test_unusable_dar(self, ratio):
        """Test DAR strings that cannot produce a ratio."""
        assert _record(display_aspect_ratio=ratio).aspect_from_dar() is None

    @pytest.mark.parametrize(
        "width,height",
        [(1920, 0), (None, 1080), (1920, None), (None, None)],
    )
    def test_dimensions_not_a_number(self, width, height):
        """Test that missing or zero dimensions give no ratio."""
        record = _record(width=width, height=height)

        assert record.aspect_from_dimensions() is None
        assert record.calculated_aspect_ratio() is None

    def test_pixel_aspect_ratio_from_sar(self):
        """Test anamorphic sample aspect ratio."""
        record = _record(sample_aspect_ratio="64:45")
        assert record.calculated_pixel_aspect_ratio() == pytest.approx(64 / 45)

    def test_pixel_aspect_ratio_defaults_to_one(self):
        """Test square pixels when SAR is absent."""
        assert _record().calculated_pixel_aspect_ratio() == 1
        assert _record(sample_aspect_ratio="0:1").calculated_pixel_aspect_ratio() == 1

    def test_no_video(self):
        """Test queries on a record without video."""
        record = FFProbeMetadata()

        assert record.aspect_from_dar() is None
        assert record.aspect_from_sar() is None
        assert record.aspect_from_dimensions() is None
        assert record.calculated_aspect_ratio() is None
        assert record.calculated_pixel_aspect_ratio() == 1


class TestRecord:
    """Tests for record properties and immutability."""

    def test_defaults(self):
        """Test default record values."""
        record = FFProbeMetadata()

        assert record.valid is True
        assert record.duration == 0.0
        assert record.resolution is None
        assert record.audio_channel_layout is None

    def test_invalid(self):
        """Test the valid property for invalid media."""
        record = FFProbeMetadata(validity=Validity.INVALID, invalid_reason="declared_error")
        assert record.valid is False

    def test_frozen(self):
        """Test that a record cannot be modified after construction."""
        record = FFProbeMetadata(duration=1.5)

        with pytest.raises(ValidationError):
            record.duration = 3.0

    def test_stream_models_frozen(self):
        """Test that stream summaries cannot be modified."""
        audio = AudioStreamInfo(codec_name="aac", channels=2)

        with pytest.raises(ValidationError):
            audio.channels = 6

    def test_resolution(self):
        """Test resolution string."""
        assert _record(width=640, height=480).resolution == "640x480"
        assert _record(width=640).resolution is None

    def test_frame_rate_float(self):
        """Test frame rate conversion."""
        video = VideoStreamInfo(frame_rate=Fraction(24000, 1001))
        assert video.frame_rate_float() == pytest.approx(23.976, rel=1e-4)

    def test_raw_trees_are_read_only(self):
        """Test that nested raw trees cannot be modified through the record."""
        tree = {"streams": [{"index": 0, "codec_type": "video"}], "format": {"size": 10}}
        record = FFProbeMetadata(
            metadata=tree,
            format=tree["format"],
            video_stream_data=tree["streams"][0],
        )

        with pytest.raises(AttributeError):
            record.metadata["streams"].clear()
        with pytest.raises(TypeError):
            record.metadata["streams"][0]["index"] = 1
        with pytest.raises(TypeError):
            record.format["size"] = 0
        with pytest.raises(TypeError):
            record.video_stream_data["codec_type"] = "audio"
        assert record.metadata["streams"][0]["index"] == 0

    def test_raw_trees_are_copied(self):
        """Test that later changes to the source tree do not reach the record."""
        tree = {"streams": [{"index": 0}], "format": {"size": 10}}
        record = FFProbeMetadata(metadata=tree, format=tree["format"])

        tree["streams"].clear()
        tree["format"]["size"] = 0

        assert len(record.metadata["streams"]) == 1
        assert record.format["size"] == 10


class TestFieldConversion:
    """Tests for conversion of raw ffprobe values during validation."""

    def test_video_from_stream_mapping(self):
        """Test building a video summary from ffprobe key names."""
        video = VideoStreamInfo.model_validate(
            {
                "codec_name": "h264",
                "profile": "",
                "pix_fmt": "yuv420p",
                "width": "1280",
                "height": 720.0,
                "bit_rate": "N/A",
                "avg_frame_rate": Fraction(25, 1),
                "codec_type": "video",
            }
        )

        assert video.colorspace == "yuv420p"
        assert video.profile is None
        assert video.width == 1280
        assert video.height == 720
        assert video.bitrate == 0
        assert video.frame_rate == Fraction(25, 1)
        assert video.summary == "h264 yuv420p 1280x720"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Fraction(30000, 1001), Fraction(30000, 1001)),
            (Fraction(0, 1), Fraction(0, 1)),
            (25, Fraction(25, 1)),
            (0, None),
            ("0/0", None),
            (float("nan"), None),
            (None, None),
        ],
    )
    def test_frame_rate(self, value, expected):
        """Test average frame rate conversion."""
        assert VideoStreamInfo(frame_rate=value).frame_rate == expected

    def test_audio_from_stream_mapping(self):
        """Test building an audio summary from ffprobe key names."""
        audio = AudioStreamInfo.model_validate(
            {"codec_name": "mp3", "channels": "2", "sample_rate": 44100.0, "bit_rate": 128000}
        )

        assert audio.channels == 2
        assert audio.sample_rate == 44100
        assert audio.bitrate == 128000
        assert audio.channel_layout == "stereo"
        assert audio.summary == "mp3 44100 Hz stereo 128000 bit/s"

    def test_empty_channel_layout_falls_back(self):
        """Test that an empty layout string is named from the channel count."""
        assert AudioStreamInfo(channels=6, channel_layout="").channel_layout == "5.1"
        assert AudioStreamInfo().channel_layout == "unknown"

    def test_record_format_fields(self):
        """Test conversion of container-level values."""
        record = FFProbeMetadata(container="", duration="12.5", start_time=None, bitrate="N/A")

        assert record.container is None
        assert record.duration == 12.5
        assert record.start_time == 0.0
        assert record.bitrate == 0
