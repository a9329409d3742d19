"""
Command line front end for waveform dumps.

Usage:
    wavedump song.wav -s 600x240 --json song.json
    wavedump song.flac -c 4410 --png song.png
"""

import argparse
import logging
import sys
from pathlib import Path

from wavedump.config import DEFAULT_SIZE
from wavedump.errors import WaveDumpError
from wavedump.io.preview import save_preview
from wavedump.pipeline import DEFAULT_FRAME_SIZE, WaveDumpPipeline


def dump_waveform(
    audio_path: Path,
    json_path: Path = None,
    png_path: Path = None,
    size: str = DEFAULT_SIZE,
    bucket_size: int = None,
    frame_size: int = DEFAULT_FRAME_SIZE,
    strict: bool = False,
) -> dict:
    """
    Dump the waveform of an audio file.

    Args:
        audio_path: Input audio file.
        json_path: Optional sidecar JSON path.
        png_path: Optional PNG preview path.
        size: Output size as ``"WxH"``.
        bucket_size: Samples per column, None to fit the whole file.
        frame_size: Samples per channel per frame.
        strict: Fail on an all-silent input instead of rendering zeros.

    Returns:
        The pipeline result dictionary.
    """
    pipeline = WaveDumpPipeline(
        size=size,
        bucket_size=bucket_size,
        frame_size=frame_size,
        on_silence="raise" if strict else "zeros",
    )
    result = pipeline.process(audio_path, sidecar_path=json_path)

    if png_path is not None:
        save_preview(result["samples"], result["height"], png_path)
        result["preview"] = png_path

    return result


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Dump a fixed-width perceptual waveform of an audio file"
    )

    parser.add_argument(
        "audio",
        type=Path,
        help="Input audio file (wav, mp3, flac)",
    )

    parser.add_argument(
        "-s", "--size",
        default=DEFAULT_SIZE,
        help=f"Output size WxH (default: {DEFAULT_SIZE})",
    )

    parser.add_argument(
        "-c", "--samples-per-column",
        dest="bucket_size",
        type=int,
        default=None,
        help="Samples per column (default: fit the whole file)",
    )

    parser.add_argument(
        "--json",
        type=Path,
        default=None,
        help="Write the sidecar record to this file",
    )

    parser.add_argument(
        "--png",
        type=Path,
        default=None,
        help="Write a PNG preview to this file",
    )

    parser.add_argument(
        "--frame-size",
        type=int,
        default=DEFAULT_FRAME_SIZE,
        help=f"Samples per frame (default: {DEFAULT_FRAME_SIZE})",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail instead of rendering zeros when the input is silent",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        sys.exit(1)

    try:
        result = dump_waveform(
            audio_path=args.audio,
            json_path=args.json,
            png_path=args.png,
            size=args.size,
            bucket_size=args.bucket_size,
            frame_size=args.frame_size,
            strict=args.strict,
        )
    except WaveDumpError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(
        f"{result['columns_written']}/{result['width']} columns, "
        f"{result['bucket_size']} samples each, duration {result['duration']:.2f}s",
        file=sys.stderr,
    )
    if result["sidecar"] is None:
        print(result["sequence"])


if __name__ == "__main__":
    main()
