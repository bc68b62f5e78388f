import base64
from io import BytesIO

import av
import numpy as np
from PIL import Image

from utils import clamp_quality
from video_errors import EncodeError, ImageError, ScaleError, ScalerError


def frame_to_rgb(frame: av.VideoFrame) -> av.VideoFrame:
    """Convert a decoded frame to packed rgb24 at its own size (format conversion only)."""
    try:
        return frame.reformat(
            width=frame.width,
            height=frame.height,
            format="rgb24",
            interpolation="BILINEAR",
        )
    except ValueError as e:
        raise ScalerError(f"Failed to create scaler: {e}") from e
    except av.error.FFmpegError as e:
        raise ScaleError(f"Failed to scale frame: {e}") from e


def pack_rows(buffer, width: int, height: int, stride: int) -> np.ndarray:
    """
    Copy rgb24 rows out of a strided buffer into a tightly packed array.

    Args:
        buffer: Object exposing the buffer protocol (e.g. a VideoPlane)
        width: Frame width in pixels
        height: Frame height in pixels
        stride: Bytes per row in ``buffer``, may exceed width * 3

    Returns:
        uint8 array with shape (height, width, 3)
    """
    row_bytes = width * 3
    if width <= 0 or height <= 0:
        raise ImageError(f"Invalid frame dimensions {width}x{height}")
    if stride < row_bytes:
        raise ImageError(f"Row stride {stride} is smaller than row width {row_bytes}")

    data = np.frombuffer(buffer, dtype=np.uint8)
    # the last row may stop at the end of its pixels rather than at the stride
    needed = stride * (height - 1) + row_bytes
    if data.size < needed:
        raise ImageError(
            f"Failed to create image from frame data: {data.size} bytes, need {needed}"
        )

    rows = np.lib.stride_tricks.as_strided(
        data, shape=(height, row_bytes), strides=(stride, 1), writeable=False
    )
    return rows.copy().reshape(height, width, 3)


def frame_to_numpy(frame: av.VideoFrame) -> np.ndarray:
    rgb_frame = frame_to_rgb(frame)
    plane = rgb_frame.planes[0]
    return pack_rows(plane, rgb_frame.width, rgb_frame.height, plane.line_size)


def numpy_to_pil(numpy_array: np.ndarray) -> Image.Image:
    if not isinstance(numpy_array, np.ndarray):
        raise ImageError(f"Expected NumPy array, got {type(numpy_array)}")
    if numpy_array.ndim != 3 or numpy_array.shape[2] != 3:
        raise ImageError(f"Unsupported array shape: {numpy_array.shape}")

    try:
        return Image.fromarray(numpy_array.astype(np.uint8, copy=False))
    except (TypeError, ValueError) as e:
        raise ImageError(f"Failed to create image from frame data: {e}") from e


def image_to_bytes(img: Image.Image, quality: int, format: str = "JPEG") -> bytes:
    buffer = BytesIO()
    try:
        img.save(buffer, format=format, quality=clamp_quality(quality))
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode JPEG: {e}") from e
    return buffer.getvalue()


def encode_frame(frame: av.VideoFrame, quality: int) -> str:
    """Encode a decoded frame as a base64 JPEG string."""
    img = numpy_to_pil(frame_to_numpy(frame))
    return base64.b64encode(image_to_bytes(img, quality)).decode("ascii")
