# composer.py
"""
Compose a raw audio stream from an image's pixels.

Flow:
  PixelGrid -> columns left to right (time) -> rows top to bottom (pitch)
  -> pixel_to_note -> oscillators.render -> column buffer -> signed 8-bit

Assumptions:
- Each column lasts samples_per_pixel samples.
- Only 88 rows starting at start_row are audible; the top one is key 88.
- At most MAX_NOTES notes sound in one column; further lit rows are dropped
  and a warning is logged.
"""

from __future__ import annotations

import logging
from array import array
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Iterator, List

from img_to_sound.conversion import PixelGrid
from img_to_sound.converter import (
    MAX_NOTES,
    NUM_KEYS,
    Note,
    is_silent,
    pixel_to_note,
    row_to_key,
)
from img_to_sound.synth.oscillators import render

logger = logging.getLogger(__name__)

# ===== DEFAULTS (EDIT HERE) =====
SAMPLE_RATE_DEFAULT = 48_000
PIXELS_PER_MINUTE_DEFAULT = 1920   # 32 pixels per second
INT8_MAX = 127


class ConfigError(ValueError):
    """Run parameters that cannot produce audio for this image."""


@dataclass(frozen=True)
class SynthesisConfig:
    sample_rate: int = SAMPLE_RATE_DEFAULT
    pixels_per_minute: int = PIXELS_PER_MINUTE_DEFAULT
    start_column: int = 0
    start_row: int = 0
    max_notes: int = MAX_NOTES

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ConfigError(f"sample rate must be positive, got {self.sample_rate}")
        if self.pixels_per_minute <= 0:
            raise ConfigError(f"pixels per minute must be positive, got {self.pixels_per_minute}")
        if self.start_column < 0 or self.start_row < 0:
            raise ConfigError("start column and start row must not be negative")
        if self.max_notes <= 0:
            raise ConfigError("max_notes must be positive")
        if self.samples_per_pixel <= 0:
            raise ConfigError(
                f"{self.pixels_per_minute} pixels per minute is too fast for "
                f"{self.sample_rate}Hz (0 samples per pixel)"
            )

    @property
    def samples_per_pixel(self) -> int:
        return int(round(self.sample_rate / (self.pixels_per_minute / 60.0)))

    @property
    def time_per_pixel(self) -> float:
        return self.samples_per_pixel / self.sample_rate

    def validate_for(self, grid: PixelGrid) -> None:
        """Reject offsets that fall outside the image."""
        if self.start_column >= grid.width:
            raise ConfigError(
                f"start column {self.start_column} is outside image width {grid.width}"
            )
        if self.start_row >= grid.height:
            raise ConfigError(
                f"start row {self.start_row} is outside image height {grid.height}"
            )

    def output_size(self, grid: PixelGrid) -> int:
        """Bytes produced for the whole image."""
        return (grid.width - self.start_column) * self.samples_per_pixel


# ---------- tiny audio utils ----------
def to_int8(x: float) -> int:
    """Truncate toward zero, then wrap into a signed byte."""
    v = int(x * INT8_MAX)
    return ((v + 128) & 0xFF) - 128


def quantize(buf: List[float]) -> bytes:
    return array("b", [to_int8(s) for s in buf]).tobytes()


def mix_into(buf: List[float], part: List[float]) -> None:
    for i, s in enumerate(part):
        buf[i] += s


# ---------- notes for one column ----------
def column_notes(grid: PixelGrid, config: SynthesisConfig, column: int) -> List[Note]:
    """
    Notes placed in one column, highest key first.

    Black pixels are skipped without using a slot. Once max_notes notes
    are placed, the next lit row stops the scan.
    """
    t = (column - config.start_column) * config.time_per_pixel
    max_y = min(grid.height, config.start_row + NUM_KEYS)

    notes: List[Note] = []
    for y in range(config.start_row, max_y):
        r, g, b = grid.pixel(y, column)
        if is_silent(r, g, b):
            continue
        if len(notes) >= config.max_notes:
            logger.warning(
                "maximum number of notes (%d) placed at one time at x = %d",
                config.max_notes, column,
            )
            break
        key = row_to_key(y, config.start_row)
        notes.append(pixel_to_note(r, g, b, key, t, config.max_notes))
    return notes


# ---------- single column synth ----------
def compose_column(grid: PixelGrid, config: SynthesisConfig, column: int) -> bytes:
    """Render one column to samples_per_pixel signed 8-bit samples."""
    if not config.start_column <= column < grid.width:
        raise ConfigError(f"column {column} is outside {config.start_column}..{grid.width - 1}")

    spp = config.samples_per_pixel
    col_buffer = [0.0] * spp
    place_buffer = [0.0] * spp
    for note in column_notes(grid, config, column):
        render(place_buffer, note.wave, note.start, note.frequency,
               note.amplitude, config.sample_rate, spp)
        mix_into(col_buffer, place_buffer)

    return quantize(col_buffer)


# ---------- whole image ----------
def compose_image(grid: PixelGrid, config: SynthesisConfig, jobs: int = 1) -> Iterator[bytes]:
    """
    Iterator of one chunk of bytes per column, left to right. Offsets are
    checked here, before the first column is rendered.

    With jobs > 1 the columns are rendered in worker processes; chunks
    still come back in column order.
    """
    config.validate_for(grid)
    return _iter_columns(grid, config, jobs)


def _iter_columns(grid: PixelGrid, config: SynthesisConfig, jobs: int) -> Iterator[bytes]:
    columns = range(config.start_column, grid.width)

    if jobs <= 1:
        for x in columns:
            yield compose_column(grid, config, x)
        return

    render_column = partial(compose_column, grid, config)
    chunksize = max(1, len(columns) // (jobs * 4))
    with ProcessPoolExecutor(max_workers=jobs) as pool:
        yield from pool.map(render_column, columns, chunksize=chunksize)


def compose_bytes(grid: PixelGrid, config: SynthesisConfig, jobs: int = 1) -> bytes:
    return b"".join(compose_image(grid, config, jobs))
