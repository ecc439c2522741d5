# oscillators.py
"""
Bare-bones oscillator functions: sine, saw, triangle, square.

Each oscillator takes an absolute time t (seconds) and a frequency f (Hz)
and returns one float sample. Sine is unipolar in [0, 1]; the others swing
between -0.5 and 0.5.

render() fills a float buffer with amplitude-scaled samples for one note.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, List


class WaveKind(Enum):
    SINE = "sine"
    SAW = "saw"
    TRIANGLE = "triangle"
    SQUARE = "square"


def _check_finite(t: float, f: float) -> None:
    if not math.isfinite(t):
        raise ValueError(f"time must be finite, got {t!r}")
    if not math.isfinite(f):
        raise ValueError(f"frequency must be finite, got {f!r}")


# ===== OSCILLATORS =====
def sine(t: float, f: float) -> float:
    # f multiplies t directly (no 2*pi)
    _check_finite(t, f)
    return 0.5 * (1 + math.sin(f * t))


def saw(t: float, f: float) -> float:
    _check_finite(t, f)
    x = t * f
    return x - math.floor(x) - 0.5


def triangle(t: float, f: float) -> float:
    return 2.0 * abs(saw(t, f)) - 0.5


def square(t: float, f: float) -> float:
    _check_finite(t, f)
    x = t * f
    return 0.5 - math.floor(2.0 * (x - math.floor(x)))


OSC_LOOKUP: Dict[WaveKind, Callable[[float, float], float]] = {
    WaveKind.SINE: sine,
    WaveKind.SAW: saw,
    WaveKind.TRIANGLE: triangle,
    WaveKind.SQUARE: square,
}


def sample(kind: WaveKind, t: float, f: float) -> float:
    """One oscillator sample of the given kind at time t."""
    fn = OSC_LOOKUP.get(kind)
    if fn is None:
        raise ValueError(f"Unknown oscillator: {kind!r} (valid: {list(OSC_LOOKUP)})")
    return fn(t, f)


def render(
    buffer: List[float],
    kind: WaveKind,
    t0: float,
    f: float,
    amplitude: float,
    sample_rate: int,
    sample_count: int,
) -> List[float]:
    """
    Write sample_count samples of one note into buffer.

    Args:
        buffer: destination, at least sample_count long (overwritten, not summed)
        kind: waveform to render
        t0: absolute start time in seconds
        f: frequency in Hz
        amplitude: scale applied to every sample
        sample_rate: samples per second, spacing is 1/sample_rate
        sample_count: number of samples to write

    Returns:
        The same buffer, for chaining.
    """
    _check_finite(t0, f)
    if not math.isfinite(amplitude):
        raise ValueError(f"amplitude must be finite, got {amplitude!r}")
    if sample_rate <= 0:
        raise ValueError("sample_rate must be positive")
    if sample_count > len(buffer):
        raise ValueError("buffer is shorter than sample_count")

    fn = OSC_LOOKUP[kind]
    dt = 1.0 / sample_rate
    for i in range(sample_count):
        buffer[i] = fn(t0 + dt * i, f) * amplitude
    return buffer
