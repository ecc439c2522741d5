from __future__ import annotations

from dataclasses import dataclass

from img_to_sound.synth.oscillators import WaveKind

NUM_KEYS = 88          # piano keyboard span, key 1 = A0
A4_KEY = 49            # key 49 = A4
A4_HZ = 440.0
MAX_NOTES = 12         # notes that may sound in one column


@dataclass(frozen=True)
class Note:
    start: float        # seconds
    frequency: float    # Hz
    amplitude: float    # 0..1, already divided by the polyphony cap
    wave: WaveKind


def key_to_frequency(key: int) -> float:
    # Equal temperament, 12 keys per octave around A4
    if not 1 <= key <= NUM_KEYS:
        raise ValueError(f"piano key must be in 1..{NUM_KEYS}, got {key}")
    p = (key - A4_KEY) / 12.0
    return A4_HZ * 2 ** p


def row_to_key(row: int, start_row: int = 0) -> int:
    """Top scanned row is the highest key (88), counting down."""
    return NUM_KEYS - (row - start_row)


def color_to_amplitude(r: int, g: int, b: int) -> float:
    """Brightest channel divided by 255 -> 0..1"""
    return max(r, g, b) / 255.0


def color_to_wave(r: int, g: int, b: int) -> WaveKind:
    if r > g and r > b:
        return WaveKind.SINE
    if g > r and g > b:
        return WaveKind.SQUARE
    if b > r and b > g:
        return WaveKind.TRIANGLE
    # no single dominant channel (greys, ties)
    return WaveKind.SAW


def is_silent(r: int, g: int, b: int) -> bool:
    return r == 0 and g == 0 and b == 0


def pixel_to_note(
    r: int,
    g: int,
    b: int,
    key: int,
    start: float,
    max_notes: int = MAX_NOTES,
) -> Note:
    """
    Turn one lit pixel into a note.

    Amplitude is pre-divided by max_notes so a fully stacked column
    stays inside [-1, 1] before quantisation.
    """
    return Note(
        start=start,
        frequency=key_to_frequency(key),
        amplitude=color_to_amplitude(r, g, b) / max_notes,
        wave=color_to_wave(r, g, b),
    )
