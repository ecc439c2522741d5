from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

RGB_CHANNELS = 3


class DecodeError(ValueError):
    """The image could not be loaded."""


@dataclass(frozen=True)
class PixelGrid:
    """
    Decoded image, row-major, 8 bits per channel.

    Sample for (row, col, channel) lives at
    (row * width + col) * channels + channel.
    """
    width: int
    height: int
    channels: int
    data: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        if self.channels < RGB_CHANNELS:
            raise ValueError(f"need at least {RGB_CHANNELS} channels, got {self.channels}")
        if len(self.data) != self.width * self.height * self.channels:
            raise ValueError("Pixel data length mismatch")

    def pixel(self, row: int, col: int) -> Tuple[int, int, int]:
        i = (row * self.width + col) * self.channels
        return self.data[i], self.data[i + 1], self.data[i + 2]


def read_image_rgb(path: str | Path) -> PixelGrid:
    p = Path(path)
    if not p.exists():
        raise DecodeError(f"could not load file: {p}") from FileNotFoundError(str(p))
    try:
        with Image.open(p) as im:
            im = ImageOps.exif_transpose(im)
            im = im.convert("RGB")
            w, h = im.size
            grid = PixelGrid(w, h, RGB_CHANNELS, im.tobytes())
    except (OSError, Image.DecompressionBombError) as e:
        raise DecodeError(f"could not load file: {p.name}") from e
    logger.info("loaded %s (%dx%d)", p.name, grid.width, grid.height)
    return grid
