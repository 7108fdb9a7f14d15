"""Frame buffers and loading."""

from .buffer import PixelBuffer, load_frame, validate_frame_pair
from .exceptions import (
    FrameError,
    FrameLoadError,
    InvalidBufferSizeError,
    DimensionMismatchError,
    AllocationFailure
)

__all__ = [
    "PixelBuffer",
    "load_frame",
    "validate_frame_pair",
    "FrameError",
    "FrameLoadError",
    "InvalidBufferSizeError",
    "DimensionMismatchError",
    "AllocationFailure"
]
