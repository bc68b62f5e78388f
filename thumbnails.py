"""Thumbnail strips and single thumbnails built on VideoFrameExtractor."""

import logging
import math
from pathlib import Path
from typing import List, Optional, Union

from VideoFrameExtractor import VideoFrameExtractor, get_frame_at_time_with_quality
from utils import (
    DEFAULT_FRAME_QUALITY,
    DEFAULT_THUMBNAIL_QUALITY,
    MAX_THUMBNAILS,
    PERCENT_THUMBNAIL_QUALITY,
)
from video_errors import InvalidArgument, NoThumbnails, VideoError, ZeroDuration
from video_probe import probe

logger = logging.getLogger(__name__)


def thumbnail_timestamps(
    duration_secs: float, interval_secs: float, max_thumbnails: Optional[int] = None
) -> List[float]:
    """
    Evenly spaced timestamps starting at 0, one per interval.

    ``max_thumbnails`` and MAX_THUMBNAILS can only lower the count.
    """
    if not math.isfinite(interval_secs) or interval_secs <= 0:
        raise InvalidArgument(f"interval_secs must be a positive number, got {interval_secs}")

    count = max(1, math.ceil(duration_secs / interval_secs))
    if max_thumbnails is not None:
        count = min(count, max(0, max_thumbnails))
    count = min(count, MAX_THUMBNAILS)

    timestamps = []
    for i in range(count):
        timestamp = i * interval_secs
        if timestamp >= duration_secs:
            break
        timestamps.append(timestamp)
    return timestamps


def percent_to_timestamp(duration_secs: float, percent: float) -> float:
    return duration_secs * max(0.0, min(1.0, percent / 100.0))


def generate_thumbnails_with_options(
    path: Union[str, Path],
    interval_secs: float,
    quality: int = DEFAULT_THUMBNAIL_QUALITY,
    max_thumbnails: Optional[int] = None,
) -> List[str]:
    """
    Extract one base64 JPEG per interval across the whole video.

    Frames that fail to extract are logged and skipped; NoThumbnails is
    raised only when every timestamp failed.
    """
    info = probe(path)
    if info.duration_secs <= 0.0:
        raise ZeroDuration("Cannot generate thumbnails for video with zero duration")

    extractor = VideoFrameExtractor(path, quality)
    thumbnails: List[str] = []

    for timestamp in thumbnail_timestamps(info.duration_secs, interval_secs, max_thumbnails):
        try:
            thumbnails.append(extractor.get_frame(timestamp))
        except VideoError as e:
            logger.warning("Failed to extract frame at %s: %s", timestamp, e)

    if not thumbnails:
        raise NoThumbnails("Failed to generate any thumbnails")

    return thumbnails


def generate_thumbnails(path: Union[str, Path], interval_secs: float) -> List[str]:
    return generate_thumbnails_with_options(path, interval_secs, DEFAULT_THUMBNAIL_QUALITY, None)


def get_thumbnail_at_percent(path: Union[str, Path], percent: float) -> str:
    """Single thumbnail at ``percent`` (clamped to 0-100) through the video."""
    info = probe(path)
    timestamp = percent_to_timestamp(info.duration_secs, percent)
    return get_frame_at_time_with_quality(path, timestamp, PERCENT_THUMBNAIL_QUALITY)


def get_first_frame(path: Union[str, Path]) -> str:
    """Poster frame of a video."""
    return get_frame_at_time_with_quality(path, 0.0, DEFAULT_FRAME_QUALITY)
