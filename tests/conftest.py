"""Shared fixtures: seeded random sources and a stand-in ffmpeg executable."""

import json
import sys
from pathlib import Path

import numpy as np
import pytest

from floating_watermark.core.config import VideoInfo, WatermarkConfig

# Behaves like ffmpeg from the driver's point of view: prints status lines
# (carriage-return separated, as ffmpeg does) on stderr, writes the output
# file and exits with a fixed code. Its argv is recorded when asked.
FAKE_FFMPEG = '''#!{python}
import json
import os
import sys

args = sys.argv[1:]
record = os.environ.get("FAKE_FFMPEG_RECORD")
if record:
    with open(record, "w") as f:
        json.dump(args, f)

sys.stderr.write("frame=   10 fps=0.0 q=28.0 size=0kB time=00:00:01.50 bitrate=0.0kbits/s\\r")
sys.stderr.write("frame=   20 fps=0.0 q=28.0 size=0kB time=00:00:03.00 bitrate=0.0kbits/s\\n")

if {exit_code} != 0:
    sys.stderr.write("Error initializing filter 'drawtext'\\n")
    sys.exit({exit_code})

output = [a for a in args if a != "-y"][-1]
with open(output, "wb") as f:
    f.write(b"fake video")
'''


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def config() -> WatermarkConfig:
    return WatermarkConfig(text="SAMPLE", font_size=40, color="#FFFFFF", opacity=0.8, speed=2, amplitude=60, count=1)


@pytest.fixture
def hd_video() -> VideoInfo:
    return VideoInfo(width=1280, height=720, duration=10.0)


@pytest.fixture
def make_fake_ffmpeg(tmp_path: Path):
    """Factory for an executable fake ffmpeg that exits with the given code."""

    def make(exit_code: int = 0) -> str:
        script = tmp_path / f"fake_ffmpeg_{exit_code}"
        script.write_text(FAKE_FFMPEG.format(python=sys.executable, exit_code=exit_code))
        script.chmod(0o755)
        return str(script)

    return make


@pytest.fixture
def ffmpeg_record(tmp_path: Path, monkeypatch):
    """Path the fake ffmpeg writes its argv to, plus a loader."""
    record = tmp_path / "ffmpeg_args.json"
    monkeypatch.setenv("FAKE_FFMPEG_RECORD", str(record))

    def load() -> list[str]:
        return json.loads(record.read_text())

    load.path = record
    return load


@pytest.fixture
def input_video(tmp_path: Path) -> Path:
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"not really a video")
    return path
