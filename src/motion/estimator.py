"""
Full-search motion estimation over a frame pair.
Drives the block matcher across every interior grid cell.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np

from config import BLOCK_SIZE, ESTIMATOR_WORKERS, MOTION_STEP, SEARCH_RANGE
from frames.buffer import PixelBuffer
from motion.block_matcher import BlockMatcher
from motion.motion_field import MotionField

logger = logging.getLogger(__name__)


class MotionEstimator:
    """
    Computes the motion field of `curr` relative to `prev`.

    The grid has nx = W // step columns and ny = H // step rows. Only an
    interior sub-grid is estimated; every other cell stays (0, 0).

    Scan-region margins:
    - near = ceil(R / step). The anchor p = idx * step must satisfy p - R >= 0.
    - far = ceil((R + B) / step). For idx < n - far the anchor obeys
      p <= (n - far - 1) * step <= W - (R + B) - step, so the furthest
      sampled pixel p + (R - 1) + (B - 1) is inside the frame.
    With B = R = 16 and step = 8 this gives near = 2 and far = 4.
    """

    def __init__(self,
                 block_size: int = BLOCK_SIZE,
                 step: int = MOTION_STEP,
                 search_range: int = SEARCH_RANGE,
                 workers: int = ESTIMATOR_WORKERS):
        self.block_size = block_size
        self.step = step
        self.search_range = search_range
        self.workers = max(1, workers)
        self.matcher = BlockMatcher(block_size, search_range)

        self.near_margin = math.ceil(search_range / step)
        self.far_margin = math.ceil((search_range + block_size) / step)

    def grid_size(self, width: int, height: int) -> Tuple[int, int]:
        """(nx, ny) for a frame of the given size."""
        return width // self.step, height // self.step

    def scan_region(self, nx: int, ny: int) -> Tuple[range, range]:
        """Grid columns and rows that get a motion vector (possibly empty)."""
        return (
            range(self.near_margin, nx - self.far_margin),
            range(self.near_margin, ny - self.far_margin)
        )

    def estimate(self, prev: PixelBuffer, curr: PixelBuffer) -> MotionField:
        """
        Estimate the motion field between two equal-sized, filtered frames.

        Args:
            prev: Previous (reference) frame
            curr: Current frame

        Returns:
            MotionField of shape nx x ny
        """
        nx, ny = self.grid_size(curr.width, curr.height)
        field = MotionField.zeros(nx, ny)
        cols, rows = self.scan_region(nx, ny)

        if len(cols) == 0 or len(rows) == 0:
            logger.info("Frame %dx%d too small to estimate any block", curr.width, curr.height)
            return field

        logger.debug("Estimating %d x %d blocks", len(cols), len(rows))

        if self.workers == 1:
            for idy in rows:
                field.vectors[idy, cols.start:cols.stop] = self._estimate_row(
                    prev.pixels, curr.pixels, idy, cols
                )
        else:
            # Rows are independent; each block keeps its own ordered scan
            with ThreadPoolExecutor(max_workers=self.workers) as exe:
                futures = {
                    idy: exe.submit(self._estimate_row, prev.pixels, curr.pixels, idy, cols)
                    for idy in rows
                }
                for idy, fut in futures.items():
                    field.vectors[idy, cols.start:cols.stop] = fut.result()

        logger.info("Estimated %d motion vectors", len(cols) * len(rows))
        return field

    def _estimate_row(self, prev: np.ndarray, curr: np.ndarray,
                      idy: int, cols: range) -> List[Tuple[int, int]]:
        row = []
        for idx in cols:
            best = self.matcher.match(prev, curr, idx * self.step, idy * self.step)
            row.append((best.dx, best.dy))
        return row


def full_search(prev: PixelBuffer, curr: PixelBuffer) -> MotionField:
    """Estimate with the default block size, step and search range."""
    return MotionEstimator().estimate(prev, curr)
