"""
Motion vector field representation.
A row-major grid of signed 8-bit (dx, dy) displacements, one per MSTEP pixels.
"""

from dataclasses import dataclass
from typing import Iterator, NamedTuple

import numpy as np

from config import FRAME_HEIGHT, FRAME_WIDTH, MOTION_STEP
from frames.exceptions import AllocationFailure


class MotionVector(NamedTuple):
    """Displacement of a current-frame block relative to the previous frame."""
    dx: int
    dy: int


@dataclass
class MotionField:
    """
    Grid of motion vectors.

    `vectors` has shape (ny, nx, 2) and dtype int8; [..., 0] is dx and
    [..., 1] is dy. Cells that were not estimated hold (0, 0).
    """
    nx: int
    ny: int
    vectors: np.ndarray

    @classmethod
    def zeros(cls, nx: int, ny: int) -> "MotionField":
        """Allocate a zero-initialized nx x ny field."""
        try:
            vectors = np.zeros((ny, nx, 2), dtype=np.int8)
        except MemoryError as exc:
            raise AllocationFailure(f"Fail to allocate a {nx}x{ny} motion field") from exc
        return cls(nx=nx, ny=ny, vectors=vectors)

    @classmethod
    def for_frame(cls, width: int = FRAME_WIDTH, height: int = FRAME_HEIGHT,
                  step: int = MOTION_STEP) -> "MotionField":
        """Field covering a width x height frame (remainders truncated)."""
        return cls.zeros(width // step, height // step)

    @property
    def size(self) -> int:
        return self.nx * self.ny

    @property
    def dx(self) -> np.ndarray:
        return self.vectors[:, :, 0]

    @property
    def dy(self) -> np.ndarray:
        return self.vectors[:, :, 1]

    def get(self, idx: int, idy: int) -> MotionVector:
        dx, dy = self.vectors[idy, idx]
        return MotionVector(int(dx), int(dy))

    def set(self, idx: int, idy: int, vector: MotionVector) -> None:
        self.vectors[idy, idx] = (vector.dx, vector.dy)

    def flat(self) -> np.ndarray:
        """Row-major (size, 2) view of the vectors."""
        return self.vectors.reshape(-1, 2)

    def __iter__(self) -> Iterator[MotionVector]:
        for dx, dy in self.flat().tolist():
            yield MotionVector(dx, dy)

    def __len__(self) -> int:
        return self.size
