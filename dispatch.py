"""
Command surface for a host application.

Extraction and thumbnail work is CPU bound, so those commands are handed to
a thread pool and return futures. Probing and handle bookkeeping are cheap
and run on the calling thread.
"""

import concurrent.futures as cf
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from HandleRegistry import HandleRegistry, default_registry
from VideoFrameExtractor import get_frame_at_time_with_quality
from VideoInfo import VideoInfo
from thumbnails import generate_thumbnails_with_options, get_first_frame, get_thumbnail_at_percent
from utils import DEFAULT_FRAME_QUALITY, DEFAULT_THUMBNAIL_QUALITY
from video_errors import VideoError
from video_probe import probe

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

COMMAND_NAMES = (
    "get_video_info",
    "open_video",
    "close_video",
    "get_frame_at_time",
    "get_frame_at_time_with_quality",
    "generate_thumbnails",
    "generate_thumbnails_with_options",
    "get_first_frame",
    "get_thumbnail_at_percent",
)


class FrameCommands:
    def __init__(self, max_workers: Optional[int] = None, registry: Optional[HandleRegistry] = None):
        self.registry = registry if registry is not None else default_registry()
        self._executor = cf.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="framegrab")

    def __enter__(self) -> "FrameCommands":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def get_video_info(self, path: PathLike) -> VideoInfo:
        return probe(path)

    def open_video(self, path: PathLike) -> str:
        return self.registry.open(path)

    def close_video(self, handle_id: str) -> None:
        self.registry.close(handle_id)

    def get_frame_at_time(self, path: PathLike, timestamp_secs: float) -> cf.Future:
        return self.get_frame_at_time_with_quality(path, timestamp_secs, DEFAULT_FRAME_QUALITY)

    def get_frame_at_time_with_quality(
        self, path: PathLike, timestamp_secs: float, quality: int
    ) -> cf.Future:
        return self._executor.submit(get_frame_at_time_with_quality, path, timestamp_secs, quality)

    def generate_thumbnails(self, path: PathLike, interval_secs: float) -> cf.Future:
        return self.generate_thumbnails_with_options(path, interval_secs, DEFAULT_THUMBNAIL_QUALITY)

    def generate_thumbnails_with_options(
        self,
        path: PathLike,
        interval_secs: float,
        quality: int,
        max_thumbnails: Optional[int] = None,
    ) -> cf.Future:
        return self._executor.submit(
            generate_thumbnails_with_options, path, interval_secs, quality, max_thumbnails
        )

    def get_first_frame(self, path: PathLike) -> cf.Future:
        return self._executor.submit(get_first_frame, path)

    def get_thumbnail_at_percent(self, path: PathLike, percent: float) -> cf.Future:
        return self._executor.submit(get_thumbnail_at_percent, path, percent)

    def run_command(self, name: str, **kwargs) -> Dict[str, Any]:
        """
        Run a named command to completion and wrap the outcome.

        Returns ``{"ok": True, "result": ...}`` or
        ``{"ok": False, "error": {"code": ..., "message": ...}}``.
        """
        if name not in COMMAND_NAMES:
            return {
                "ok": False,
                "error": {"code": "UNKNOWN_COMMAND", "message": f"Unknown command: {name}"},
            }

        try:
            result = getattr(self, name)(**kwargs)
            if isinstance(result, cf.Future):
                result = result.result()
        except VideoError as e:
            logger.debug("Command %s failed: %s", name, e)
            return {"ok": False, "error": e.to_dict()}

        if isinstance(result, VideoInfo):
            result = result.to_dict()
        return {"ok": True, "result": result}
