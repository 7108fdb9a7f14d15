"""
Full-search block matching with a sum-of-absolute-differences cost.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from config import BLOCK_SIZE, SEARCH_RANGE
from frames.buffer import PixelBuffer

Frame = Union[PixelBuffer, np.ndarray]


@dataclass(frozen=True)
class BlockMatch:
    """Best displacement found for one block."""
    dx: int
    dy: int
    sad: int


def _luma(frame: Frame) -> np.ndarray:
    return frame.pixels if isinstance(frame, PixelBuffer) else frame


def compute_sad(prev: Frame, curr: Frame, px: int, py: int, cx: int, cy: int,
                block_size: int = BLOCK_SIZE) -> int:
    """
    SAD between the block of `prev` at (px, py) and the block of `curr` at (cx, cy).

    No bounds checking: both blocks must lie inside their frames.
    """
    prev_block = _luma(prev)[py:py + block_size, px:px + block_size].astype(np.int32)
    curr_block = _luma(curr)[cy:cy + block_size, cx:cx + block_size].astype(np.int32)
    return int(np.abs(prev_block - curr_block).sum())


class BlockMatcher:
    """
    Exhaustive search of a [-R, R-1] x [-R, R-1] displacement window.

    Candidates are ranked in scan order (dy outer, dx inner, both ascending)
    and a candidate replaces the running best when its cost is less than or
    equal to it. Among equal costs the last scanned candidate therefore wins.
    """

    def __init__(self, block_size: int = BLOCK_SIZE, search_range: int = SEARCH_RANGE):
        self.block_size = block_size
        self.search_range = search_range

    def cost_surface(self, prev: Frame, curr: Frame, posx: int, posy: int) -> np.ndarray:
        """
        SAD for every candidate displacement of the block anchored at (posx, posy).

        Returns:
            int32 array of shape (2R, 2R); entry [dy + R, dx + R] is the cost
            of displacement (dx, dy)
        """
        b, r = self.block_size, self.search_range
        prev_pixels, curr_pixels = _luma(prev), _luma(curr)

        # Every previous-frame pixel any candidate can touch
        window = prev_pixels[posy - r:posy + r + b - 1, posx - r:posx + r + b - 1].astype(np.int16)
        block = curr_pixels[posy:posy + b, posx:posx + b].astype(np.int16)

        candidates = sliding_window_view(window, (b, b))
        return np.abs(candidates - block).sum(axis=(2, 3), dtype=np.int32)

    def match(self, prev: Frame, curr: Frame, posx: int, posy: int) -> BlockMatch:
        """
        Find where the block of `curr` at (posx, posy) came from in `prev`.

        The caller guarantees that every accessed pixel is inside the frame:
        posx - R >= 0, posy - R >= 0, posx + R + B - 1 <= width and
        posy + R + B - 1 <= height.
        """
        r = self.search_range
        costs = self.cost_surface(prev, curr, posx, posy).ravel()

        # argmin on the reversed scan yields the last minimum in scan order
        best = costs.size - 1 - int(np.argmin(costs[::-1]))
        row, col = divmod(best, 2 * r)
        return BlockMatch(dx=col - r, dy=row - r, sad=int(costs[best]))
