"""
Grayscale frame buffers and frame loading.
Frames enter the pipeline here and are validated once.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from config import FRAME_READ_FLAG, MIN_FRAME_SIZE
from frames.exceptions import (
    DimensionMismatchError, FrameLoadError, InvalidBufferSizeError
)

logger = logging.getLogger(__name__)

FrameSource = Union[str, Path, np.ndarray]


@dataclass
class PixelBuffer:
    """
    A grayscale frame: width, height and row-major 8-bit luma samples.

    `pixels` has shape (height, width), dtype uint8 and is C-contiguous,
    so `samples` is a flat view of the same memory. The median filter
    mutates it in place.
    """
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidBufferSizeError(
                f"Frame dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.pixels.size != self.width * self.height:
            raise InvalidBufferSizeError(
                f"Expected {self.width * self.height} samples for a "
                f"{self.width}x{self.height} frame, got {self.pixels.size}"
            )
        self.pixels = np.ascontiguousarray(
            self.pixels, dtype=np.uint8
        ).reshape(self.height, self.width)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Wrap a 2-D grayscale array (copied, so the caller keeps its own).

        Non-uint8 arrays are accepted only when every value fits in 0-255.

        Raises:
            InvalidBufferSizeError: If the array is not 2-D
            FrameLoadError: If a sample lies outside the 8-bit range
        """
        if array.ndim != 2:
            raise InvalidBufferSizeError(
                f"Expected a 2-D grayscale array, got shape {array.shape}"
            )
        if array.dtype != np.uint8 and array.size > 0:
            low, high = array.min(), array.max()
            if low < 0 or high > 255:
                raise FrameLoadError(
                    f"Samples must lie in [0, 255], got [{low}, {high}] ({array.dtype})"
                )
        height, width = array.shape
        return cls(width=width, height=height, pixels=np.array(array, dtype=np.uint8))

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """Build a frame from a raw row-major byte buffer."""
        samples = np.frombuffer(bytes(data), dtype=np.uint8).copy()
        return cls(width=width, height=height, pixels=samples)

    @property
    def samples(self) -> np.ndarray:
        """Flat row-major view of the luma samples."""
        return self.pixels.reshape(-1)

    @property
    def shape(self) -> tuple:
        return (self.height, self.width)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.pixels.copy())


def load_frame(source: FrameSource) -> PixelBuffer:
    """
    Load a frame as 8-bit grayscale.

    Args:
        source: Image path (PGM or anything OpenCV decodes), or an array.
            Grayscale arrays are used as is, BGR arrays are converted.

    Returns:
        PixelBuffer owning its samples

    Raises:
        FrameLoadError: If the source cannot be read or has an unsupported shape
        InvalidBufferSizeError: If the frame is smaller than the median window
    """
    if isinstance(source, np.ndarray):
        image = source
        if image.ndim == 3 and image.shape[2] == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        elif image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]
        elif image.ndim != 2:
            raise FrameLoadError(f"Unsupported frame shape {image.shape}")
        origin = "array"
    else:
        path = Path(source)
        image = cv2.imread(str(path), FRAME_READ_FLAG)
        if image is None:
            raise FrameLoadError(f"Cannot read input image {path}")
        origin = str(path)

    frame = PixelBuffer.from_array(image)
    if frame.width < MIN_FRAME_SIZE or frame.height < MIN_FRAME_SIZE:
        raise InvalidBufferSizeError(
            f"Frame {frame.width}x{frame.height} is smaller than "
            f"{MIN_FRAME_SIZE}x{MIN_FRAME_SIZE}"
        )

    logger.debug("Loaded %dx%d frame from %s", frame.width, frame.height, origin)
    return frame


def validate_frame_pair(prev: PixelBuffer, curr: PixelBuffer) -> None:
    """Reject a frame pair whose dimensions differ."""
    if prev.width != curr.width or prev.height != curr.height:
        raise DimensionMismatchError(
            f"Image sizes of the two frames do not match: "
            f"{prev.width}x{prev.height} vs {curr.width}x{curr.height}"
        )
