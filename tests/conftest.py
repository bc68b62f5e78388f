import base64
import sys
import wave
from io import BytesIO
from pathlib import Path

import av
import numpy as np
import pytest
from PIL import Image

# Ensure the flat top-level modules are importable from a plain checkout
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

WIDTH = 64
HEIGHT = 48
FPS = 10


def write_video(path: Path, seconds: int, level_step: int, fps: int = FPS) -> Path:
    """Write an mpeg4 video whose frame i is a flat gray of level i * level_step."""
    container = av.open(str(path), mode="w")
    stream = container.add_stream("mpeg4", rate=fps)
    stream.width = WIDTH
    stream.height = HEIGHT
    stream.pix_fmt = "yuv420p"

    for i in range(seconds * fps):
        level = min(255, i * level_step)
        img = np.full((HEIGHT, WIDTH, 3), level, dtype=np.uint8)
        av_frame = av.VideoFrame.from_ndarray(img, format="rgb24")
        for packet in stream.encode(av_frame):
            container.mux(packet)

    # Flush encoder
    for packet in stream.encode():
        container.mux(packet)

    container.close()
    return path


def mean_level(encoded: str) -> float:
    """Mean gray level of a base64 JPEG."""
    img = Image.open(BytesIO(base64.b64decode(encoded))).convert("L")
    return float(np.asarray(img).mean())


@pytest.fixture(scope="session")
def media_dir(tmp_path_factory) -> Path:
    return tmp_path_factory.mktemp("media")


@pytest.fixture(scope="session")
def sample_video(media_dir) -> Path:
    """3 seconds, 30 frames, level 8 * i."""
    return write_video(media_dir / "sample.mp4", seconds=3, level_step=8)


@pytest.fixture(scope="session")
def ten_second_video(media_dir) -> Path:
    """10 seconds, 100 frames, level 2 * i."""
    return write_video(media_dir / "ten_seconds.mp4", seconds=10, level_step=2)


@pytest.fixture(scope="session")
def audio_only(media_dir) -> Path:
    path = media_dir / "tone.wav"
    with wave.open(str(path), "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(8000)
        w.writeframes(b"\x00\x00" * 8000)
    return path
