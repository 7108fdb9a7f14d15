"""
3x3 median filtering for impulse-noise removal.
Runs in place on a PixelBuffer; border pixels are never touched.
"""

import logging

import cv2
import numpy as np

from config import MEDIAN_KERNEL, MEDIAN_MODE
from frames.buffer import PixelBuffer

logger = logging.getLogger(__name__)

MEDIAN_MODES = ("raster", "snapshot")


class MedianFilter:
    """
    Replaces every interior pixel with the median of its 3x3 neighbourhood.

    Two scan semantics are available:
    1. "raster": one buffer, row-major scan. Pixels above and to the left
       have already been replaced when a window is read, so results depend
       on scan order. This reproduces legacy output bit for bit.
    2. "snapshot": every window reads the unfiltered frame (cv2.medianBlur),
       then the interior is copied back. Order-independent, and faster.

    The two modes do not produce identical output in general.
    """

    def __init__(self, mode: str = MEDIAN_MODE):
        if mode not in MEDIAN_MODES:
            raise ValueError(f"Unknown median mode {mode!r}, expected one of {MEDIAN_MODES}")
        self.mode = mode

    def apply(self, frame: PixelBuffer) -> PixelBuffer:
        """
        Filter `frame` in place.

        Args:
            frame: Frame of at least 3x3 pixels

        Returns:
            The same PixelBuffer, for chaining
        """
        if self.mode == "raster":
            _median_raster(frame.pixels)
        else:
            _median_snapshot(frame.pixels)
        logger.debug("Median filtered %dx%d frame (%s)", frame.width, frame.height, self.mode)
        return frame


def _median_raster(image: np.ndarray) -> None:
    height, width = image.shape
    rows = image.tolist()

    for row in range(1, height - 1):
        above, here, below = rows[row - 1], rows[row], rows[row + 1]
        for col in range(1, width - 1):
            # Row-major window; here[col - 1] is already filtered
            window = above[col - 1:col + 2] + here[col - 1:col + 2] + below[col - 1:col + 2]
            window.sort()
            here[col] = window[4]

    image[1:-1, 1:-1] = np.asarray(rows, dtype=np.uint8)[1:-1, 1:-1]


def _median_snapshot(image: np.ndarray) -> None:
    blurred = cv2.medianBlur(image, MEDIAN_KERNEL)
    image[1:-1, 1:-1] = blurred[1:-1, 1:-1]


def median3x3(frame: PixelBuffer, mode: str = MEDIAN_MODE) -> PixelBuffer:
    """Filter one frame in place with a 3x3 median."""
    return MedianFilter(mode).apply(frame)
