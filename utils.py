from pathlib import Path
from typing import Iterable, List, Union

DEFAULT_FPS = 30.0
DEFAULT_FRAME_QUALITY = 85
DEFAULT_THUMBNAIL_QUALITY = 60
PERCENT_THUMBNAIL_QUALITY = 70
MAX_THUMBNAILS = 100

SAFETY_HORIZON_SECS = 2  # how far past the target a scan may run
LOCK_TIMEOUT_SECS = 5.0

video_extensions = {".mp4", ".webm", ".mkv", ".mov", ".avi", ".flv", ".wmv", ".m4v"}


def clamp_quality(quality: int) -> int:
    """Clamp a JPEG quality value into 1-100."""
    return max(1, min(100, int(quality)))


def get_video_files(directory: Path) -> List[Path]:
    """Get all video files from directory."""
    video_files = []

    for file_path in directory.iterdir():
        if file_path.is_file() and file_path.suffix.lower() in video_extensions:
            video_files.append(file_path)

    return sorted(video_files)


def expand_video_paths(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """Expand directories into the video files they contain, keep files as given."""
    expanded: List[Path] = []
    for p in paths:
        path = Path(p)
        if path.is_dir():
            expanded.extend(get_video_files(path))
        else:
            expanded.append(path)
    return expanded
