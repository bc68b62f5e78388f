"""
Errors raised by the frame extraction engine.

Every error carries a short machine-readable ``code`` and a human-readable
``message``, rendered together as ``"CODE: message"``.
"""

from typing import Dict


class VideoError(Exception):
    code = "VIDEO_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


class OpenError(VideoError):
    code = "OPEN_ERROR"


class NoVideoStream(VideoError):
    code = "NO_VIDEO_STREAM"


class CodecError(VideoError):
    code = "CODEC_ERROR"


class DecoderError(VideoError):
    code = "DECODER_ERROR"


class ScalerError(VideoError):
    code = "SCALER_ERROR"


class ScaleError(VideoError):
    code = "SCALE_ERROR"


class ImageError(VideoError):
    code = "IMAGE_ERROR"


class EncodeError(VideoError):
    code = "JPEG_ENCODE_ERROR"


class FrameNotFound(VideoError):
    code = "FRAME_NOT_FOUND"


class ZeroDuration(VideoError):
    code = "ZERO_DURATION"


class NoThumbnails(VideoError):
    code = "NO_THUMBNAILS"


class FileNotFound(VideoError):
    code = "FILE_NOT_FOUND"


class LockError(VideoError):
    code = "LOCK_ERROR"


class InvalidArgument(VideoError, ValueError):
    code = "INVALID_ARGUMENT"
