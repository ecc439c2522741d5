# main.py
"""
Entry point to turn an image into a raw signed 8-bit audio stream.

Flow:
  conversion.read_image_rgb -> composer.compose_image -> output.write_pcm
  (-> output.write_wav / output.play_file)

Example:
  img-to-sound mario.png -o mario.bin -v -x 5 -y 0 -p 1500 -r 48000 --play
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from img_to_sound import output
from img_to_sound.composer import (
    PIXELS_PER_MINUTE_DEFAULT,
    SAMPLE_RATE_DEFAULT,
    ConfigError,
    SynthesisConfig,
    compose_image,
)
from img_to_sound.conversion import DecodeError, read_image_rgb

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="img-to-sound",
        description="Convert an image to signed 8-bit mono PCM. Columns are time, rows are piano keys.",
    )
    parser.add_argument("image", type=Path, help="input image")
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="output file (default: <image>.bin)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="print progress",
    )
    parser.add_argument(
        "-x", "--start-column",
        type=int,
        default=0,
        help="first image column to play (default: %(default)s)",
    )
    parser.add_argument(
        "-y", "--start-row",
        type=int,
        default=0,
        help="image row mapped to the highest key (default: %(default)s)",
    )
    parser.add_argument(
        "-p", "--ppm",
        type=int,
        default=PIXELS_PER_MINUTE_DEFAULT,
        help="tempo in pixels per minute (default: %(default)s)",
    )
    parser.add_argument(
        "-r", "--rate",
        type=int,
        default=SAMPLE_RATE_DEFAULT,
        help="sample rate in Hz (default: %(default)s)",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        help="worker processes for rendering columns (default: %(default)s)",
    )
    parser.add_argument(
        "--wav",
        action="store_true",
        help="also write an 8-bit WAV next to the raw output",
    )
    parser.add_argument(
        "--play",
        action="store_true",
        help="play the result with aplay when done",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    out_path: Path = args.output or args.image.with_suffix(".bin")
    wav_path = out_path.with_suffix(".wav")
    want_wav = args.wav or (args.play and output.PLAYER_NEEDS_WAV)
    if want_wav and wav_path == out_path:
        print("output file already ends in .wav, pick another name for the raw stream", file=sys.stderr)
        return 1

    try:
        config = SynthesisConfig(
            sample_rate=args.rate,
            pixels_per_minute=args.ppm,
            start_column=args.start_column,
            start_row=args.start_row,
        )
    except ConfigError as e:
        print(f"invalid options: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(
            f"converting {args.image} to {out_path} with sample rate of {config.sample_rate}Hz "
            f"where each pixel is {config.time_per_pixel:f}s long"
        )

    try:
        grid = read_image_rgb(args.image)
    except DecodeError as e:
        logger.debug("decode failed: %s", e)
        print("could not load file", file=sys.stderr)
        return 1

    try:
        chunks = compose_image(grid, config, jobs=args.jobs)
    except ConfigError as e:
        print(f"invalid options: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        chunks = tqdm(chunks, total=grid.width - config.start_column, desc="Rendering", unit="px")

    try:
        written = output.write_pcm(out_path, chunks)
    except OSError as e:
        print(f"could not write {out_path}: {e}", file=sys.stderr)
        return 1
    logger.info("wrote %d bytes to %s", written, out_path)

    if want_wav:
        try:
            output.write_wav(wav_path, out_path.read_bytes(), config.sample_rate)
        except OSError as e:
            print(f"could not write {wav_path}: {e}", file=sys.stderr)
            return 1
        logger.info("wrote %s", wav_path)

    if args.play:
        output.play_file(out_path, config.sample_rate)

    if args.verbose:
        print(f"Done. Wrote {out_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
