from pathlib import Path

import pytest
from PIL import Image

from img_to_sound import main as cli
from img_to_sound import output


def _save_png(path: Path, pixels, w: int, h: int):
    im = Image.new("RGB", (w, h))
    im.putdata(pixels)
    im.save(path, "PNG")


def test_defaults():
    args = cli.parse_args(["pic.png"])
    assert args.image == Path("pic.png")
    assert args.output is None
    assert (args.start_column, args.start_row) == (0, 0)
    assert (args.ppm, args.rate, args.jobs) == (1920, 48_000, 1)
    assert not (args.verbose or args.wav or args.play)


def test_short_flags():
    args = cli.parse_args(["pic.png", "-o", "x.bin", "-v", "-x", "5", "-y", "1", "-p", "1500", "-r", "44100"])
    assert args.output == Path("x.bin")
    assert args.verbose
    assert (args.start_column, args.start_row, args.ppm, args.rate) == (5, 1, 1500, 44100)


def test_converts_image_to_raw_stream(tmp_path: Path):
    img = tmp_path / "pic.png"
    _save_png(img, [(255, 0, 0), (0, 0, 0), (0, 0, 0), (0, 0, 255)], 2, 2)

    assert cli.main([str(img), "-p", "480", "-r", "8000"]) == 0
    out = tmp_path / "pic.bin"
    assert out.exists()
    assert len(out.read_bytes()) == 2 * 1000


def test_start_column_shortens_output(tmp_path: Path):
    img = tmp_path / "pic.png"
    _save_png(img, [(255, 255, 255)] * 4, 4, 1)
    out = tmp_path / "song.bin"

    assert cli.main([str(img), "-o", str(out), "-x", "3", "-p", "480", "-r", "8000", "-v"]) == 0
    assert len(out.read_bytes()) == 1000


def test_wav_flag_writes_wav(tmp_path: Path):
    img = tmp_path / "pic.png"
    _save_png(img, [(0, 255, 0)], 1, 1)

    assert cli.main([str(img), "-p", "480", "-r", "8000", "--wav"]) == 0
    assert (tmp_path / "pic.wav").exists()


def test_play_flag_hands_off_to_player(tmp_path: Path, monkeypatch):
    img = tmp_path / "pic.png"
    _save_png(img, [(0, 255, 0)], 1, 1)
    played = []
    monkeypatch.setattr(output, "play_file", lambda path, rate: played.append((path, rate)) or 0)

    assert cli.main([str(img), "-p", "480", "-r", "8000", "--play"]) == 0
    assert played == [(tmp_path / "pic.bin", 8000)]


def test_bad_image_reports_could_not_load(tmp_path: Path, capsys):
    img = tmp_path / "bad.png"
    img.write_bytes(b"nope")

    assert cli.main([str(img)]) == 1
    assert "could not load file" in capsys.readouterr().err
    assert not (tmp_path / "bad.bin").exists()


@pytest.mark.parametrize("flags", [["-r", "0"], ["-p", "0"], ["-x", "7"], ["-y", "3"], ["-x", "-1"]])
def test_bad_options_fail_without_output(tmp_path: Path, flags, capsys):
    img = tmp_path / "pic.png"
    _save_png(img, [(255, 0, 0)] * 2, 2, 1)

    assert cli.main([str(img), *flags]) == 1
    assert "invalid options" in capsys.readouterr().err
    assert not (tmp_path / "pic.bin").exists()


def test_wav_write_failure_reports_error(tmp_path: Path, capsys):
    img = tmp_path / "pic.png"
    _save_png(img, [(0, 255, 0)], 1, 1)
    (tmp_path / "pic.wav").mkdir()

    assert cli.main([str(img), "-p", "480", "-r", "8000", "--wav"]) == 1
    assert "could not write" in capsys.readouterr().err
