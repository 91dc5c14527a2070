"""Example demonstrating parsing of captured ffprobe output."""

from pathlib import Path

import mediaprobe
from mediaprobe import Config, FFProbeParser


def main():
    """Parse a saved ffprobe JSON document and print the summary."""
    print("=" * 70)
    print("FFProbe Metadata Parsing Example")
    print("=" * 70)

    config = mediaprobe.configure(Config.from_yaml_string("logging:\n  format: text\n"))
    parser = FFProbeParser(config=config.probe)

    # Output of: ffprobe -print_format json -show_format -show_streams -show_error
    output_path = Path(__file__).parent / "ffprobe_sample_output.json"
    record = parser.parse_metadata(output_path.read_bytes(), stderr_text="")

    print(f"\n   Valid: {record.valid}")
    print(f"   Container: {record.container}")
    print(f"   Duration: {record.duration:.2f}s")
    print(f"   Bitrate: {record.bitrate:,} bps")
    if record.creation_time:
        print(f"   Created: {record.creation_time.isoformat()}")

    if record.video:
        print("\n   Video Stream:")
        print(f"   - {record.video.summary}")
        print(f"   - Frame rate: {record.video.frame_rate} ({record.video.frame_rate_float():.3f} fps)")
        print(f"   - Aspect ratio: {record.calculated_aspect_ratio():.4f}")
        print(f"   - Pixel aspect ratio: {record.calculated_pixel_aspect_ratio():.4f}")
        if record.video.rotation is not None:
            print(f"   - Rotation: {record.video.rotation}")

    if record.audio:
        print("\n   Audio Stream:")
        print(f"   - {record.audio.summary}")

    print("\n   Flattened for storage:")
    for key, value in FFProbeParser.extract_video_metadata(record).items():
        print(f"   - {key}: {value}")


if __name__ == "__main__":
    main()
