"""
Container probing with PyAV.

Opens a container, picks the best video stream and derives its metadata
without decoding any frame data.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from pathlib import Path
from typing import Optional, Tuple, Union

import av

from VideoInfo import VideoInfo
from utils import DEFAULT_FPS
from video_errors import CodecError, DecoderError, NoVideoStream, OpenError

logger = logging.getLogger(__name__)


def open_container(path: Union[str, Path]) -> av.container.InputContainer:
    file_path = str(path)
    try:
        return av.open(file_path)
    except (av.error.FFmpegError, OSError) as e:
        raise OpenError(f"Failed to open video file '{file_path}': {e}") from e


def best_video_stream(container: av.container.InputContainer) -> av.video.stream.VideoStream:
    # FFmpeg's own ranking (av_find_best_stream) decides between multiple video streams
    try:
        stream = container.streams.best("video")
    except ValueError:
        stream = None
    if stream is None:
        raise NoVideoStream("No video stream found in file")
    return stream


def video_decoder(stream: av.video.stream.VideoStream) -> av.video.codeccontext.VideoCodecContext:
    """Return the decoder context PyAV built from the stream's codec parameters."""
    try:
        codec_ctx = stream.codec_context
    except (av.error.FFmpegError, ValueError) as e:
        raise CodecError(f"Failed to get codec context: {e}") from e

    if codec_ctx is None:
        raise CodecError(f"No codec context for stream {stream.index}")
    if not codec_ctx.is_decoder:
        raise DecoderError(f"Failed to create video decoder for stream {stream.index}")
    return codec_ctx


def _rate_to_fps(rate) -> Optional[float]:
    if rate is None or rate.denominator == 0:
        return None
    return rate.numerator / rate.denominator


def derive_fps(stream) -> float:
    """average_rate, then base_rate (r_frame_rate), then DEFAULT_FPS."""
    fps = _rate_to_fps(stream.average_rate)
    if fps is None:
        fps = _rate_to_fps(stream.base_rate)
    if fps is None:
        fps = DEFAULT_FPS
    return fps


def derive_duration(container, stream) -> float:
    """Container duration, then stream duration, then 0.0."""
    if container.duration is not None and container.duration > 0:
        return container.duration / av.time_base

    time_base = stream.time_base
    if (
        stream.duration is not None
        and stream.duration > 0
        and time_base is not None
        and time_base.denominator != 0
    ):
        return stream.duration * time_base.numerator / time_base.denominator

    return 0.0


def estimate_frame_count(stream, duration_secs: float, fps: float) -> int:
    if stream.frames and stream.frames > 0:
        return int(stream.frames)
    return int(math.floor(duration_secs * fps + 0.5))


def probe_stream(path: Union[str, Path]) -> Tuple[VideoInfo, int, Fraction]:
    """
    Probe a video file.

    Returns:
        (VideoInfo, index of the selected video stream, stream time base)
    """
    with open_container(path) as container:
        stream = best_video_stream(container)
        codec_ctx = video_decoder(stream)

        fps = derive_fps(stream)
        duration_secs = derive_duration(container, stream)
        codec = codec_ctx.codec
        bitrate = container.bit_rate if container.bit_rate and container.bit_rate > 0 else None

        info = VideoInfo(
            duration_secs=duration_secs,
            fps=fps,
            width=codec_ctx.width,
            height=codec_ctx.height,
            frame_count=estimate_frame_count(stream, duration_secs, fps),
            codec=codec.name if codec is not None else "unknown",
            bitrate=bitrate,
        )
        stream_index = stream.index
        time_base = stream.time_base

    logger.debug(
        "Probed %s: %.3fs at %.3f fps, %dx%d %s",
        path, info.duration_secs, info.fps, info.width, info.height, info.codec,
    )
    return info, stream_index, time_base


def probe(path: Union[str, Path]) -> VideoInfo:
    info, _, _ = probe_stream(path)
    return info


get_video_info = probe
