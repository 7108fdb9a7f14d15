"""
Find-motion pipeline - orchestrates a single frame-pair run.
Median filter -> full-search estimation -> statistics -> text report.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from config import (
    BLOCK_SIZE, ESTIMATOR_WORKERS, LEGACY_MIN_STATISTIC,
    MEDIAN_MODE, MOTION_STEP, SEARCH_RANGE
)
from frames.buffer import FrameSource, PixelBuffer, load_frame, validate_frame_pair
from frames.exceptions import InvalidBufferSizeError
from motion.estimator import MotionEstimator
from motion.median_filter import MedianFilter
from motion.motion_field import MotionField
from motion.statistics import FieldStatistics, FieldSummary, MagnitudeFn, quick_sqrt_magnitude
from report.field_reporter import FieldReporter

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Signal = Callable[[bool], None]


@dataclass
class MotionResult:
    """Everything one run produces."""
    field: MotionField
    summary: FieldSummary
    report: str

    # Integer milliseconds, measured with the injected clock
    filter_ms: int = 0
    estimate_ms: int = 0


class FindMotionPipeline:
    """
    Runs the full motion pipeline on one frame pair.

    The clock and the busy signal are the only device-facing collaborators
    and neither is visible to the algorithmic components.

    Usage:
        pipeline = FindMotionPipeline()
        result = pipeline.run_sources("1.pgm", "2.pgm")
        print(result.report)
    """

    def __init__(self,
                 median_mode: str = MEDIAN_MODE,
                 block_size: int = BLOCK_SIZE,
                 step: int = MOTION_STEP,
                 search_range: int = SEARCH_RANGE,
                 workers: int = ESTIMATOR_WORKERS,
                 magnitude: MagnitudeFn = quick_sqrt_magnitude,
                 legacy_min: bool = LEGACY_MIN_STATISTIC,
                 clock: Clock = time.perf_counter,
                 signal: Optional[Signal] = None):
        """
        Initialize the pipeline.

        Args:
            median_mode: "raster" or "snapshot" median semantics
            block_size: Block edge in pixels
            step: Grid step between motion vectors
            search_range: Half-size of the displacement window
            workers: Thread count for block estimation
            magnitude: Vector length function used by the statistics
            legacy_min: Start the min accumulator at 0 (legacy output, min is always 0)
            clock: Returns seconds; used only for timings
            signal: Called with True when computation starts, False when it ends
        """
        self._filter = MedianFilter(median_mode)
        self._estimator = MotionEstimator(block_size, step, search_range, workers)
        self._statistics = FieldStatistics(magnitude, legacy_min)
        self._reporter = FieldReporter()
        self._clock = clock
        self._signal = signal

    @property
    def estimator(self) -> MotionEstimator:
        """Estimator whose block size, step and search range this pipeline uses."""
        return self._estimator

    def run(self, prev: PixelBuffer, curr: PixelBuffer) -> MotionResult:
        """
        Process a frame pair. Both frames are median filtered in place.

        Raises:
            DimensionMismatchError: If the frames differ in size
            InvalidBufferSizeError: If the frames are smaller than one grid step
        """
        validate_frame_pair(prev, curr)

        nx, ny = self._estimator.grid_size(curr.width, curr.height)
        if nx == 0 or ny == 0:
            raise InvalidBufferSizeError(
                f"Frame {curr.width}x{curr.height} is smaller than one "
                f"{self._estimator.step}-pixel motion grid step"
            )

        if self._signal is not None:
            self._signal(True)
        logger.info("Begin motion estimation on %dx%d frames", curr.width, curr.height)

        try:
            start = self._clock()
            self._filter.apply(prev)
            self._filter.apply(curr)
            filtered = self._clock()

            field = self._estimator.estimate(prev, curr)
            estimated = self._clock()
        finally:
            if self._signal is not None:
                self._signal(False)

        filter_ms = int((filtered - start) * 1000)
        estimate_ms = int((estimated - filtered) * 1000)
        logger.info("Filtering took %d ms, estimation took %d ms", filter_ms, estimate_ms)

        summary = self._statistics.compute(field)
        report = self._reporter.render_report(field, summary, filter_ms, estimate_ms)

        return MotionResult(
            field=field,
            summary=summary,
            report=report,
            filter_ms=filter_ms,
            estimate_ms=estimate_ms
        )

    def run_sources(self, prev_source: FrameSource, curr_source: FrameSource) -> MotionResult:
        """Load two frames (paths or arrays) and process them."""
        prev = load_frame(prev_source)
        curr = load_frame(curr_source)
        return self.run(prev, curr)
