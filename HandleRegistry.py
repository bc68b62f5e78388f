import logging
import os
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from VideoInfo import VideoHandle
from utils import LOCK_TIMEOUT_SECS
from video_errors import FileNotFound, LockError
from video_probe import probe_stream

logger = logging.getLogger(__name__)


class HandleRegistry:
    """
    Maps opaque handle ids to VideoHandle snapshots.

    A handle is bookkeeping only: no decoder stays open behind it, and
    extraction never goes through the registry. The lock guards single
    insert/remove/lookup operations and is never held while probing.
    """

    def __init__(self, lock_timeout: float = LOCK_TIMEOUT_SECS):
        self.lock_timeout = lock_timeout
        self._lock = threading.Lock()
        self._handles: Dict[str, VideoHandle] = {}

    @contextmanager
    def _locked(self) -> Iterator[Dict[str, VideoHandle]]:
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise LockError("Failed to acquire lock on video handles")
        try:
            yield self._handles
        finally:
            self._lock.release()

    def open(self, path: Union[str, Path]) -> str:
        file_path = str(path)
        if not os.path.exists(file_path):
            raise FileNotFound(f"Video file not found: {file_path}")

        info, stream_index, time_base = probe_stream(file_path)
        handle = VideoHandle(
            path=file_path,
            info=info,
            stream_index=stream_index,
            time_base=time_base,
        )

        handle_id = f"video_{uuid.uuid4().hex}"
        with self._locked() as handles:
            handles[handle_id] = handle

        logger.debug("Opened %s as %s", file_path, handle_id)
        return handle_id

    def close(self, handle_id: str) -> None:
        with self._locked() as handles:
            removed = handles.pop(handle_id, None)
        if removed is not None:
            logger.debug("Closed %s", handle_id)

    def get(self, handle_id: str) -> Optional[VideoHandle]:
        with self._locked() as handles:
            return handles.get(handle_id)

    def __contains__(self, handle_id: str) -> bool:
        return self.get(handle_id) is not None

    def __len__(self) -> int:
        with self._locked() as handles:
            return len(handles)


_registry = HandleRegistry()


def default_registry() -> HandleRegistry:
    return _registry


def open_video(path: Union[str, Path]) -> str:
    """Probe a video and register a handle for it."""
    return _registry.open(path)


def close_video(handle_id: str) -> None:
    """Forget a handle. Unknown ids are ignored."""
    _registry.close(handle_id)


def get_handle(handle_id: str) -> Optional[VideoHandle]:
    return _registry.get(handle_id)


def handle_count() -> int:
    return len(_registry)
