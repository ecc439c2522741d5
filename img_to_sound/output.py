# output.py
"""
Sinks for the synthesized stream: raw signed 8-bit file, 8-bit WAV,
and hand-off to an external player.
"""

from __future__ import annotations

import logging
import subprocess
import sys
import wave
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

# afplay cannot read headerless PCM, it is handed the WAV instead
PLAYER_NEEDS_WAV = sys.platform.startswith("darwin")


def write_pcm(path: str | Path, chunks: Iterable[bytes]) -> int:
    """
    Append chunks to path in order. Returns bytes written.

    If anything fails after the file is opened the partial file is
    removed before the error propagates.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    try:
        with open(p, "wb") as out:
            for chunk in chunks:
                out.write(chunk)
                written += len(chunk)
    except BaseException:
        logger.error("removing partial output %s after %d bytes", p, written)
        p.unlink(missing_ok=True)
        raise
    return written


def write_wav(path: str | Path, pcm_bytes: bytes, sample_rate: int) -> Path:
    """Wrap signed 8-bit samples in a mono WAV (WAV stores 8-bit as unsigned)."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    unsigned = bytes((b + 128) & 0xFF for b in pcm_bytes)
    with wave.open(str(p), "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(1)      # 8-bit
        w.setframerate(sample_rate)
        w.writeframes(unsigned)
    return p


def player_command(path: str | Path, sample_rate: int) -> list[str]:
    if PLAYER_NEEDS_WAV:
        return ["afplay", str(Path(path).with_suffix(".wav"))]
    return ["aplay", "-t", "raw", "-f", "S8", "-c", "1", "-r", str(sample_rate), str(path)]


def play_file(path: str | Path, sample_rate: int) -> int:
    """Play the raw stream with the system player. Returns its exit code."""
    cmd = player_command(path, sample_rate)
    logger.info("playing with %s", " ".join(cmd))
    try:
        return subprocess.run(cmd, check=False).returncode
    except FileNotFoundError:
        logger.error("player %s not found", cmd[0])
        return 127
