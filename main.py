"""
Frame grabbing CLI

Probe videos, pull single frames and build thumbnail strips.

usage:
python main.py info [paths...]
python main.py frame [path] (--at SECONDS | --percent P) [-o out.jpg]
python main.py thumbs [path] --interval SECONDS [--max N] [-o out_dir]
"""

import argparse
import base64
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from VideoFrameExtractor import get_frame_at_time_with_quality
from thumbnails import generate_thumbnails_with_options, percent_to_timestamp
from utils import DEFAULT_FRAME_QUALITY, DEFAULT_THUMBNAIL_QUALITY, expand_video_paths
from video_errors import VideoError
from video_probe import probe


def setup_argparse() -> argparse.ArgumentParser:
    """Set up command line argument parsing."""
    parser = argparse.ArgumentParser(
        description='Extract frames and thumbnails from video files'
    )
    parser.add_argument('-v', '--verbose', action='store_true', default=False, help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    info = subparsers.add_parser('info', help='Print video metadata as JSON')
    info.add_argument('paths', nargs='+', help='Video files or directories containing videos')

    frame = subparsers.add_parser('frame', help='Extract a single frame as JPEG')
    frame.add_argument('path', help='Video file')
    position = frame.add_mutually_exclusive_group(required=True)
    position.add_argument('--at', type=float, help='Timestamp in seconds')
    position.add_argument('--percent', type=float, help='Position in percent of the duration (0-100)')
    frame.add_argument('--quality', type=int, default=DEFAULT_FRAME_QUALITY, help='JPEG quality (1-100)')
    frame.add_argument('-o', '--output', help='Write the JPEG here instead of printing base64')

    thumbs = subparsers.add_parser('thumbs', help='Extract evenly spaced thumbnails')
    thumbs.add_argument('path', help='Video file')
    thumbs.add_argument('--interval', type=float, required=True, help='Seconds between thumbnails')
    thumbs.add_argument('--quality', type=int, default=DEFAULT_THUMBNAIL_QUALITY, help='JPEG quality (1-100)')
    thumbs.add_argument('--max', type=int, default=None, dest='max_thumbnails', help='Maximum number of thumbnails')
    thumbs.add_argument('-o', '--output-dir', help='Directory for thumb_NNN.jpg files instead of printing base64')

    return parser


def run_info(paths: List[str]) -> None:
    for path in expand_video_paths(paths):
        record = probe(path).to_dict()
        record['path'] = str(path)
        print(json.dumps(record, ensure_ascii=False))


def run_frame(path: str, at: Optional[float], percent: Optional[float], quality: int, output: Optional[str]) -> None:
    if percent is not None:
        at = percent_to_timestamp(probe(path).duration_secs, percent)

    encoded = get_frame_at_time_with_quality(path, at, quality)
    if output:
        Path(output).write_bytes(base64.b64decode(encoded))
        print(f"Wrote frame at {at:.3f}s to {output}")
    else:
        print(encoded)


def run_thumbs(path: str, interval: float, quality: int, max_thumbnails: Optional[int], output_dir: Optional[str]) -> None:
    thumbnails = generate_thumbnails_with_options(path, interval, quality, max_thumbnails)
    if output_dir:
        target_dir = Path(output_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        for i, encoded in enumerate(thumbnails):
            (target_dir / f"thumb_{i:03d}.jpg").write_bytes(base64.b64decode(encoded))
        print(f"Wrote {len(thumbnails)} thumbnails to {target_dir}")
    else:
        for encoded in thumbnails:
            print(encoded)


def main(argv: Optional[List[str]] = None) -> int:
    parser = setup_argparse()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        if args.command == 'info':
            run_info(args.paths)
        elif args.command == 'frame':
            run_frame(args.path, args.at, args.percent, args.quality, args.output)
        elif args.command == 'thumbs':
            run_thumbs(args.path, args.interval, args.quality, args.max_thumbnails, args.output_dir)
    except VideoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
