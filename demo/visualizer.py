"""
Demo visualizer for block motion estimation.
Draws the estimated motion field over the current frame.
"""

import sys
from pathlib import Path

# Add src to path BEFORE any local imports
_src_path = str(Path(__file__).parent.parent / "src")
if _src_path not in sys.path:
    sys.path.insert(0, _src_path)

import argparse
import logging
from typing import Optional

import cv2
import numpy as np

# Now import local modules (these are top-level within src/)
import config
from frames.buffer import load_frame
from pipeline.find_motion import FindMotionPipeline, MotionResult


class MotionFieldVisualizer:
    """
    Renders a motion result on top of the current frame.

    Displays:
    - Current (filtered) frame
    - Estimated scan region outline
    - One arrow per non-zero motion vector, from its source in the
      previous frame to the block centre in the current frame
    - Summary panel
    """

    def __init__(self, median_mode: str = config.MEDIAN_MODE,
                 workers: int = config.ESTIMATOR_WORKERS,
                 pipeline: Optional[FindMotionPipeline] = None):
        if pipeline is None:
            pipeline = FindMotionPipeline(median_mode=median_mode, workers=workers)
        self.pipeline = pipeline

        # Drawing geometry must follow the estimator that produced the field
        self.estimator = pipeline.estimator

        # Colors
        self.COLORS = {
            'motion': (255, 255, 0),      # Cyan
            'region': (128, 128, 128),    # Gray
            'text': (255, 255, 255),      # White
        }

    def run(self, prev_path: str, curr_path: str) -> np.ndarray:
        """Process a frame pair and return the annotated image."""
        prev = load_frame(prev_path)
        curr = load_frame(curr_path)
        result = self.pipeline.run(prev, curr)

        vis_frame = cv2.cvtColor(curr.pixels, cv2.COLOR_GRAY2BGR)
        vis_frame = self._draw_scan_region(vis_frame, result)
        vis_frame = self._draw_motion_vectors(vis_frame, result)
        vis_frame = self._draw_metrics_panel(vis_frame, result)
        return vis_frame

    def _draw_scan_region(self, frame, result: MotionResult):
        """Outline the blocks that were estimated."""
        cols, rows = self.estimator.scan_region(result.field.nx, result.field.ny)
        if len(cols) == 0 or len(rows) == 0:
            return frame

        step, block = self.estimator.step, self.estimator.block_size
        x1, y1 = cols.start * step, rows.start * step
        x2 = (cols.stop - 1) * step + block
        y2 = (rows.stop - 1) * step + block
        cv2.rectangle(frame, (x1, y1), (x2, y2), self.COLORS['region'], 1)
        return frame

    def _draw_motion_vectors(self, frame, result: MotionResult):
        """Draw one arrow per non-zero vector."""
        step = self.estimator.step
        half = self.estimator.block_size // 2
        field = result.field

        for idy, idx in np.argwhere(np.any(field.vectors != 0, axis=2)):
            dx, dy = field.get(idx, idy)
            cx, cy = idx * step + half, idy * step + half
            cv2.arrowedLine(
                frame,
                (int(cx + dx), int(cy + dy)),
                (int(cx), int(cy)),
                self.COLORS['motion'],
                1,
                tipLength=0.3
            )

        return frame

    def _draw_metrics_panel(self, frame, result: MotionResult):
        """Draw summary panel in corner."""
        panel_h = 110
        panel_w = 260
        cv2.rectangle(frame, (10, 10), (panel_w + 10, panel_h + 10), (0, 0, 0), -1)
        cv2.rectangle(frame, (10, 10), (panel_w + 10, panel_h + 10), (128, 128, 128), 1)

        x = 20
        y = 35
        line_h = 25

        def draw_text(label, value, color=self.COLORS['text']):
            nonlocal y
            cv2.putText(frame, f"{label}: {value}", (x, y),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 1)
            y += line_h

        draw_text("Mean", f"{result.summary.mean:.1f}px")
        draw_text("Range", f"{result.summary.min:.1f}-{result.summary.max:.1f}px")
        draw_text("Filter", f"{result.filter_ms}ms")
        draw_text("Estimate", f"{result.estimate_ms}ms")

        return frame


def main():
    parser = argparse.ArgumentParser(
        description="Block Motion Estimation - Demo Visualizer"
    )
    parser.add_argument("prev", type=str, help="Previous frame (e.g. 1.pgm)")
    parser.add_argument("curr", type=str, help="Current frame (e.g. 2.pgm)")
    parser.add_argument(
        "--output", "-o", type=str, default=None,
        help="Write the annotated frame here instead of showing a window"
    )
    parser.add_argument("--median-mode", choices=["raster", "snapshot"], default=config.MEDIAN_MODE)
    parser.add_argument("--workers", type=int, default=config.ESTIMATOR_WORKERS)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    visualizer = MotionFieldVisualizer(args.median_mode, args.workers)
    vis_frame = visualizer.run(args.prev, args.curr)

    if args.output is not None:
        cv2.imwrite(args.output, vis_frame)
        print(f"Wrote {args.output}")
        return

    cv2.imshow("Block Motion Field", vis_frame)
    cv2.waitKey(0)
    cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
