"""Pydantic models for parsed ffprobe metadata."""

import math
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from fractions import Fraction
from types import MappingProxyType
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

CHANNEL_LAYOUT_NAMES = {1: "mono", 2: "stereo", 6: "5.1"}

# ffprobe reports an unknown average frame rate as "0/0"
UNKNOWN_FRAME_RATE = "0/0"


class Validity(str, Enum):
    """Whether probed media decoded well enough to trust its metadata."""

    VALID = "valid"
    INVALID = "invalid"


def channel_layout_name(channels: int) -> str:
    """
    Name a channel layout from its channel count.

    Example:
        >>> channel_layout_name(6)
        '5.1'
        >>> channel_layout_name(4)
        'unknown'
    """
    return CHANNEL_LAYOUT_NAMES.get(channels, "unknown")


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of a JSON tree (mappings become proxies, lists tuples)."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Fraction)) and not isinstance(value, bool)


def _parse_int(value: Any) -> int:
    """Integer value like Ruby's to_i: anything unparseable is 0."""
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0


def _parse_float(value: Any) -> float:
    """Float value like Ruby's to_f: anything unparseable or non-finite is 0.0."""
    if _is_number(value):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return result if math.isfinite(result) else 0.0


def _parse_optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _join(parts: List[Any]) -> str:
    return " ".join(str(part) for part in parts if part is not None and part != "")


def _codec_tag_pair(tag_string: Optional[str], tag: Optional[str]) -> Optional[str]:
    if tag_string is None and tag is None:
        return None
    return f"({tag_string or ''} / {tag or ''})"


def _aspect_from_ratio_string(ratio: Optional[str]) -> Optional[float]:
    """Convert a "W:H" string to W/H, or None when absent, unparseable or zero."""
    if not ratio:
        return None
    parts = ratio.split(":")
    if len(parts) != 2:
        return None
    try:
        width, height = float(parts[0]), float(parts[1])
    except ValueError:
        return None
    if height == 0:
        return None
    aspect = width / height
    return None if aspect == 0 else aspect


class VideoStreamInfo(BaseModel):
    """Summary of the primary video stream.

    Validates directly from an ffprobe stream mapping; ffprobe key names
    are accepted as aliases (``pix_fmt``, ``bit_rate``, ``avg_frame_rate``).
    """

    codec_name: Optional[str] = None
    profile: Optional[str] = None
    colorspace: Optional[str] = Field(default=None, alias="pix_fmt")
    width: Optional[int] = None
    height: Optional[int] = None
    bitrate: int = Field(default=0, alias="bit_rate")
    sample_aspect_ratio: Optional[str] = None
    display_aspect_ratio: Optional[str] = None
    frame_rate: Optional[Fraction] = Field(default=None, alias="avg_frame_rate")
    rotation: Optional[int] = None
    codec_tag_string: Optional[str] = None
    codec_tag: Optional[str] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, populate_by_name=True)

    @field_validator(
        "codec_name",
        "profile",
        "colorspace",
        "sample_aspect_ratio",
        "display_aspect_ratio",
        "codec_tag_string",
        "codec_tag",
        mode="before",
    )
    @classmethod
    def parse_optional_str(cls, v: Any) -> Optional[str]:
        """Treat empty strings as absent and stringify coerced scalars."""
        return _parse_optional_str(v)

    @field_validator("width", "height", "rotation", mode="before")
    @classmethod
    def parse_optional_int(cls, v: Any) -> Optional[int]:
        """Convert present values to int, keeping absence as None."""
        if v is None:
            return None
        return _parse_int(v)

    @field_validator("bitrate", mode="before")
    @classmethod
    def parse_bitrate(cls, v: Any) -> int:
        """Convert bitrate to int, defaulting to 0."""
        return _parse_int(v)

    @field_validator("frame_rate", mode="before")
    @classmethod
    def parse_frame_rate(cls, v: Any) -> Optional[Fraction]:
        """
        Convert the average frame rate to a Fraction.

        ffprobe's "0/0" means unknown. Coercion turns it into the plain
        integer 0, while a genuine "0/1" stays Fraction(0, 1).
        """
        if v is None or v == UNKNOWN_FRAME_RATE or not _is_number(v):
            return None
        if isinstance(v, Fraction):
            return v
        if isinstance(v, float) and not math.isfinite(v):
            return None
        if v == 0:
            return None
        return Fraction(v)

    @property
    def resolution(self) -> Optional[str]:
        """Return resolution as WxH string."""
        if self.width is None or self.height is None:
            return None
        return f"{self.width}x{self.height}"

    @property
    def summary(self) -> str:
        """
        One-line description of the stream.

        Example:
            >>> video.summary
            'h264 (High) (avc1 / 0x31637661) yuv420p 1920x1080 [SAR 1:1 DAR 16:9]'
        """
        sar = self.sample_aspect_ratio
        dar = self.display_aspect_ratio
        return _join(
            [
                self.codec_name,
                f"({self.profile})" if self.profile else None,
                _codec_tag_pair(self.codec_tag_string, self.codec_tag),
                self.colorspace,
                self.resolution,
                f"[SAR {sar or ''} DAR {dar or ''}]" if sar or dar else None,
            ]
        )

    def frame_rate_float(self) -> Optional[float]:
        """
        Return the average frame rate as a float.

        Example:
            >>> VideoStreamInfo(frame_rate=Fraction(30000, 1001)).frame_rate_float()
            29.97002997002997
        """
        if self.frame_rate is None:
            return None
        return float(self.frame_rate)


class AudioStreamInfo(BaseModel):
    """Summary of the primary audio stream."""

    codec_name: Optional[str] = None
    channels: int = 0
    sample_rate: int = 0
    bitrate: int = Field(default=0, alias="bit_rate")
    channel_layout: Optional[str] = Field(default=None, validate_default=True)
    sample_fmt: Optional[str] = None
    codec_tag_string: Optional[str] = None
    codec_tag: Optional[str] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("codec_name", "sample_fmt", "codec_tag_string", "codec_tag", mode="before")
    @classmethod
    def parse_optional_str(cls, v: Any) -> Optional[str]:
        """Treat empty strings as absent and stringify coerced scalars."""
        return _parse_optional_str(v)

    @field_validator("channels", "sample_rate", "bitrate", mode="before")
    @classmethod
    def parse_string_int(cls, v: Any) -> int:
        """Convert to int, defaulting to 0."""
        return _parse_int(v)

    @field_validator("channel_layout", mode="before")
    @classmethod
    def fallback_channel_layout(cls, v: Any, info: ValidationInfo) -> str:
        """Use the explicit layout, or name one from the channel count."""
        layout = _parse_optional_str(v)
        if layout is not None:
            return layout
        return channel_layout_name(info.data.get("channels", 0))

    @property
    def summary(self) -> str:
        """One-line description of the stream."""
        return _join(
            [
                self.codec_name,
                _codec_tag_pair(self.codec_tag_string, self.codec_tag),
                self.sample_rate,
                "Hz",
                self.channel_layout,
                self.sample_fmt,
                self.bitrate,
                "bit/s",
            ]
        )


class FFProbeMetadata(BaseModel):
    """
    Typed metadata for one probed media item.

    Built once by :class:`~mediaprobe.parsers.ffprobe_parser.FFProbeParser`
    and never mutated afterwards: attributes are frozen and the raw trees
    are exposed as read-only mappings and tuples. Only the first video
    stream and the first audio stream are summarized; further streams of
    the same type are available through :attr:`metadata` only.

    Callers should check :attr:`valid` before trusting stream fields. An
    invalid record still carries whatever could be computed.
    """

    metadata: Any = Field(
        default_factory=lambda: MappingProxyType({}),
        description="Full typed probe tree (read-only)",
    )
    format: Any = None
    container: Optional[str] = None
    duration: float = 0.0
    start_time: Optional[float] = None
    bitrate: Optional[int] = None
    creation_time: Optional[datetime] = None
    video: Optional[VideoStreamInfo] = None
    audio: Optional[AudioStreamInfo] = None
    video_stream_data: Any = None
    audio_stream_data: Any = None
    validity: Validity = Validity.VALID
    invalid_reason: Optional[str] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator(
        "metadata", "format", "video_stream_data", "audio_stream_data", mode="before"
    )
    @classmethod
    def freeze_tree(cls, v: Any) -> Any:
        """Store raw trees as read-only copies."""
        return freeze(v)

    @field_validator("container", mode="before")
    @classmethod
    def parse_container(cls, v: Any) -> Optional[str]:
        """Treat an empty container name as absent."""
        return _parse_optional_str(v)

    @field_validator("duration", "start_time", mode="before")
    @classmethod
    def parse_string_float(cls, v: Any) -> float:
        """Convert to a finite float, defaulting to 0.0."""
        return _parse_float(v)

    @field_validator("bitrate", mode="before")
    @classmethod
    def parse_string_int(cls, v: Any) -> int:
        """Convert to int, defaulting to 0."""
        return _parse_int(v)

    @property
    def valid(self) -> bool:
        """True when the media decoded well enough to trust its metadata."""
        return self.validity is Validity.VALID

    @property
    def resolution(self) -> Optional[str]:
        """Resolution of the primary video stream as WxH, if known."""
        return self.video.resolution if self.video else None

    @property
    def audio_channel_layout(self) -> Optional[str]:
        """Channel layout of the primary audio stream, if any."""
        return self.audio.channel_layout if self.audio else None

    def aspect_from_dar(self) -> Optional[float]:
        """Aspect ratio from the display aspect ratio string."""
        return _aspect_from_ratio_string(self.video.display_aspect_ratio if self.video else None)

    def aspect_from_sar(self) -> Optional[float]:
        """Pixel aspect ratio from the sample aspect ratio string."""
        return _aspect_from_ratio_string(self.video.sample_aspect_ratio if self.video else None)

    def aspect_from_dimensions(self) -> Optional[float]:
        """Aspect ratio from width/height, or None when it is not a number."""
        if self.video is None or self.video.width is None or not self.video.height:
            return None
        return self.video.width / self.video.height

    def calculated_aspect_ratio(self) -> Optional[float]:
        """
        Display aspect ratio, falling back to frame dimensions.

        Example:
            >>> record.video.display_aspect_ratio, record.video.width, record.video.height
            ('0:1', 1920, 1080)
            >>> record.calculated_aspect_ratio()
            1.7777777777777777
        """
        return self.aspect_from_dar() or self.aspect_from_dimensions()

    def calculated_pixel_aspect_ratio(self) -> float:
        """Sample aspect ratio, or 1 for square pixels when unknown."""
        return self.aspect_from_sar() or 1.0
