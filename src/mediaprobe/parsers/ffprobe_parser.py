"""Parser for ffprobe JSON output."""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

import structlog

from ..common.config import ProbeConfig
from ..core.exceptions import CreationTimeParseError, FFProbeParseError
from .ffprobe_models import AudioStreamInfo, FFProbeMetadata, Validity, VideoStreamInfo
from .json_coercion import coerce


def evaluate_validity(
    tree: Dict[str, Any],
    stderr_text: str,
    has_video: bool,
    has_audio: bool,
) -> Tuple[Validity, Optional[str]]:
    """
    Decide whether probed media is usable.

    Each check is independent; the first one that matches makes the media
    invalid and names the reason.

    Args:
        tree: Typed probe tree
        stderr_text: Diagnostic output of ffprobe
        has_video: Whether a video stream was summarized
        has_audio: Whether an audio stream was summarized

    Returns:
        Tuple of (validity, reason). Reason is None for valid media.
    """
    checks = (
        ("declared_error", "error" in tree),
        (
            "unsupported_codec",
            "Unsupported codec" in stderr_text and not has_video and not has_audio,
        ),
        ("codec_not_supported", "is not supported" in stderr_text),
        ("codec_parameters_not_found", "could not find codec parameters" in stderr_text),
    )
    for reason, matched in checks:
        if matched:
            return Validity.INVALID, reason
    return Validity.VALID, None


def _first_stream(streams: List[Any], codec_type: str) -> Optional[Dict[str, Any]]:
    for stream in streams:
        if isinstance(stream, dict) and stream.get("codec_type") == codec_type:
            return stream
    return None


def _tags(container: Dict[str, Any]) -> Dict[str, Any]:
    tags = container.get("tags")
    return tags if isinstance(tags, dict) else {}


class FFProbeParser:
    """
    Build :class:`FFProbeMetadata` records from raw ffprobe output.

    The parser consumes two text blobs produced elsewhere: the JSON written
    to stdout by ``ffprobe -print_format json -show_format -show_streams
    -show_error`` and the diagnostic text written to stderr.

    Example:
        >>> parser = FFProbeParser()
        >>> record = parser.parse_metadata(json_text, stderr_text)
        >>> if record.valid:
        ...     print(record.video.summary)
    """

    def __init__(self, config: Optional[ProbeConfig] = None):
        """
        Initialize the parser.

        Args:
            config: ProbeConfig with expected and fallback text encodings
        """
        self.config = config or ProbeConfig()
        self.logger = structlog.get_logger(__name__)

    def fix_encoding(self, output: Union[str, bytes]) -> str:
        """
        Return ffprobe output as text, reinterpreting invalid input.

        Output that is not valid in the configured encoding is decoded with
        the single-byte fallback encoding instead. This is a best-effort
        shim for files with legacy-encoded tags.

        Args:
            output: Raw stdout as bytes, or a str that may hold surrogate
                escapes from a lossy decode

        Returns:
            Decoded text

        Raises:
            FFProbeParseError: If the fallback encoding cannot decode it either
        """
        if isinstance(output, str):
            try:
                output.encode(self.config.encoding)
                return output
            except UnicodeEncodeError:
                try:
                    output = output.encode(self.config.encoding, errors="surrogateescape")
                except UnicodeEncodeError as e:
                    raise FFProbeParseError(f"ffprobe output cannot be re-encoded: {e}") from e

        try:
            return output.decode(self.config.encoding)
        except UnicodeDecodeError as e:
            self.logger.warning(
                "ffprobe_encoding_fallback",
                encoding=self.config.encoding,
                fallback_encoding=self.config.fallback_encoding,
                position=e.start,
            )

        try:
            return output.decode(self.config.fallback_encoding)
        except UnicodeDecodeError as e:
            raise FFProbeParseError(
                f"ffprobe output is not valid {self.config.fallback_encoding}: {e}"
            ) from e

    def load_json(self, output: Union[str, bytes]) -> Dict[str, Any]:
        """
        Decode ffprobe JSON output into a typed tree.

        Args:
            output: Raw ffprobe stdout

        Returns:
            Typed probe tree (see :func:`~mediaprobe.parsers.json_coercion.coerce`)

        Raises:
            FFProbeParseError: If the output is not a JSON object
            MalformedLiteralError: If a scalar literal cannot be converted
        """
        text = self.fix_encoding(output)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            self.logger.error(
                "ffprobe_json_parse_failed",
                error=str(e),
                output_length=len(text),
            )
            raise FFProbeParseError(f"Failed to parse ffprobe JSON output: {e}") from e

        if not isinstance(data, dict):
            raise FFProbeParseError(
                f"ffprobe output must be a JSON object, got {type(data).__name__}"
            )
        return coerce(data)

    def parse_metadata(
        self,
        output: Union[str, bytes],
        stderr_text: Optional[str] = None,
    ) -> FFProbeMetadata:
        """
        Parse raw ffprobe output into a metadata record.

        Args:
            output: Raw ffprobe stdout (JSON)
            stderr_text: Raw ffprobe stderr

        Returns:
            FFProbeMetadata record

        Raises:
            FFProbeParseError: If the JSON cannot be decoded
            MalformedLiteralError: If a scalar literal cannot be converted
            CreationTimeParseError: If the creation timestamp is malformed
        """
        return self.parse_tree(self.load_json(output), stderr_text)

    def parse_tree(
        self,
        tree: Dict[str, Any],
        stderr_text: Optional[str] = None,
    ) -> FFProbeMetadata:
        """
        Build a metadata record from an already typed probe tree.

        Args:
            tree: Typed probe tree as returned by :meth:`load_json`
            stderr_text: Raw ffprobe stderr

        Returns:
            FFProbeMetadata record

        Raises:
            CreationTimeParseError: If the creation timestamp is malformed
        """
        stderr_text = stderr_text or ""

        if "error" in tree:
            validity, reason = evaluate_validity(tree, stderr_text, False, False)
            self.logger.info("ffprobe_declared_error", error=tree["error"])
            return FFProbeMetadata(
                metadata=tree,
                duration=0.0,
                validity=validity,
                invalid_reason=reason,
            )

        fmt = tree.get("format")
        fmt = fmt if isinstance(fmt, dict) else {}
        streams = tree.get("streams")
        streams = streams if isinstance(streams, list) else []

        video_data = _first_stream(streams, "video")
        audio_data = _first_stream(streams, "audio")
        video = self._build_video(video_data) if video_data is not None else None
        audio = self._build_audio(audio_data) if audio_data is not None else None

        validity, reason = evaluate_validity(
            tree, stderr_text, video is not None, audio is not None
        )

        record = FFProbeMetadata(
            metadata=tree,
            format=fmt,
            container=fmt.get("format_name"),
            duration=fmt.get("duration"),
            start_time=fmt.get("start_time"),
            bitrate=fmt.get("bit_rate"),
            creation_time=self._parse_creation_time(fmt),
            video=video,
            audio=audio,
            video_stream_data=video_data,
            audio_stream_data=audio_data,
            validity=validity,
            invalid_reason=reason,
        )

        if not record.valid:
            self.logger.info("ffprobe_metadata_invalid", reason=reason)

        self.logger.debug(
            "ffprobe_metadata_parsed",
            container=record.container,
            duration=record.duration,
            resolution=record.resolution,
            video_codec=video.codec_name if video else None,
            audio_codec=audio.codec_name if audio else None,
            valid=record.valid,
        )
        return record

    def _parse_creation_time(self, fmt: Dict[str, Any]) -> Optional[datetime]:
        tags = _tags(fmt)
        if "creation_time" not in tags:
            return None

        value = tags["creation_time"]
        try:
            return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError as e:
            self.logger.error("ffprobe_creation_time_invalid", value=value)
            raise CreationTimeParseError(
                f"Invalid creation_time in format tags: {value!r}", value=value
            ) from e

    def _build_video(self, stream: Dict[str, Any]) -> VideoStreamInfo:
        return VideoStreamInfo.model_validate(
            {**stream, "rotation": _tags(stream).get("rotate")}
        )

    def _build_audio(self, stream: Dict[str, Any]) -> AudioStreamInfo:
        return AudioStreamInfo.model_validate(stream)

    @staticmethod
    def extract_video_metadata(record: FFProbeMetadata) -> Dict[str, Any]:
        """
        Flatten a metadata record for database storage.

        Args:
            record: Parsed FFProbeMetadata

        Returns:
            Dictionary with keys: duration, container_format, bitrate, width,
            height, video_codec, aspect_ratio, frame_rate, rotation,
            audio_codec, audio_channels, audio_sample_rate, valid

        Example:
            >>> metadata = FFProbeParser.extract_video_metadata(record)
            >>> print(metadata["width"], metadata["height"])
            1920 1080
        """
        video = record.video
        audio = record.audio
        return {
            "duration": record.duration,
            "container_format": record.container,
            "bitrate": record.bitrate,
            "width": video.width if video else None,
            "height": video.height if video else None,
            "video_codec": video.codec_name if video else None,
            "aspect_ratio": record.calculated_aspect_ratio(),
            "frame_rate": video.frame_rate_float() if video else None,
            "rotation": video.rotation if video else None,
            "audio_codec": audio.codec_name if audio else None,
            "audio_channels": audio.channels if audio else None,
            "audio_sample_rate": audio.sample_rate if audio else None,
            "valid": record.valid,
        }


def parse_metadata(
    output: Union[str, bytes],
    stderr_text: Optional[str] = None,
) -> FFProbeMetadata:
    """Parse raw ffprobe output with the default configuration."""
    return FFProbeParser().parse_metadata(output, stderr_text)
