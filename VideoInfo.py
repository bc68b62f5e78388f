from dataclasses import asdict, dataclass
from fractions import Fraction
from typing import Optional


@dataclass(frozen=True)
class VideoInfo:
    """Video metadata container"""
    duration_secs: float  # 0.0 if undeterminable
    fps: float
    width: int
    height: int
    frame_count: int  # estimated
    codec: str
    bitrate: Optional[int] = None  # bits per second

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class VideoHandle:
    """Snapshot of an opened video, taken at open time and never refreshed"""
    path: str
    info: VideoInfo
    stream_index: int
    time_base: Fraction
