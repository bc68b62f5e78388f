import logging
from pathlib import Path
from typing import List, Optional, Union

import av

from frame_encoder import encode_frame
from utils import DEFAULT_FRAME_QUALITY, SAFETY_HORIZON_SECS
from video_errors import DecoderError, FrameNotFound
from video_probe import best_video_stream, open_container, video_decoder

logger = logging.getLogger(__name__)


def seek_to_time(container, timestamp_secs: float) -> None:
    """
    Seek to the keyframe at or before ``timestamp_secs``.

    Falls back to the start of the stream when the precise seek fails.
    """
    offset = int(timestamp_secs * av.time_base)  # microseconds
    try:
        container.seek(offset, backward=True, any_frame=False)
        return
    except av.error.FFmpegError as e:
        logger.debug("Seek to %.3fs failed (%s), seeking to start", timestamp_secs, e)

    try:
        container.seek(0)
    except av.error.FFmpegError as e:
        raise DecoderError(f"Failed to seek to start of stream: {e}") from e


def _decode(decoder, packet) -> List[av.VideoFrame]:
    try:
        return decoder.decode(packet)
    except av.error.FFmpegError as e:
        raise DecoderError(f"Failed to decode video packet: {e}") from e


def _packets(container, stream):
    """Demux ``stream`` until the end of the file or the first read error."""
    try:
        for packet in container.demux(stream):
            yield packet
    except av.error.FFmpegError as e:
        logger.warning("Stopped reading packets: %s", e)


class VideoFrameExtractor:
    """
    Extract single frames from video files using PyAV

    Every call opens the container fresh, so instances hold no decoder
    state and can be shared between threads.
    """

    def __init__(self, file_path: Union[str, Path], quality: int = DEFAULT_FRAME_QUALITY):
        self.file_path = file_path
        self.quality = quality

    def find_frame(self, timestamp_secs: float) -> av.VideoFrame:
        """Decode the frame whose pts is closest to ``timestamp_secs``."""
        with open_container(self.file_path) as container:
            stream = best_video_stream(container)
            decoder = video_decoder(stream)
            time_base = stream.time_base

            target_ts = int(timestamp_secs * time_base.denominator / time_base.numerator)
            horizon_ts = target_ts + SAFETY_HORIZON_SECS * time_base.denominator

            seek_to_time(container, timestamp_secs)

            closest: Optional[av.VideoFrame] = None
            closest_diff = 0

            for packet in _packets(container, stream):
                if packet.stream.index != stream.index:
                    continue
                # demux() ends with an empty packet; the decoder is drained below instead
                if packet.size == 0:
                    continue

                for frame in _decode(decoder, packet):
                    frame_ts = frame.pts if frame.pts is not None else 0
                    diff = abs(frame_ts - target_ts)
                    if closest is None or diff < closest_diff:
                        closest, closest_diff = frame, diff

                    if frame_ts >= target_ts:
                        return closest

                if packet.pts is not None and packet.pts > horizon_ts:
                    break

            for frame in _decode(decoder, None):
                frame_ts = frame.pts if frame.pts is not None else 0
                diff = abs(frame_ts - target_ts)
                if closest is None or diff < closest_diff:
                    closest, closest_diff = frame, diff

        if closest is None:
            raise FrameNotFound(f"Could not find frame at timestamp {timestamp_secs}")
        return closest

    def get_frame(self, timestamp_secs: float, quality: Optional[int] = None) -> str:
        """Return the frame nearest ``timestamp_secs`` as a base64 JPEG."""
        frame = self.find_frame(timestamp_secs)
        return encode_frame(frame, self.quality if quality is None else quality)


def get_frame_at_time_with_quality(
    path: Union[str, Path], timestamp_secs: float, quality: int
) -> str:
    return VideoFrameExtractor(path).get_frame(timestamp_secs, quality)


def get_frame_at_time(path: Union[str, Path], timestamp_secs: float) -> str:
    return get_frame_at_time_with_quality(path, timestamp_secs, DEFAULT_FRAME_QUALITY)


extract = get_frame_at_time_with_quality
