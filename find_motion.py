import argparse
import logging
import sys
from pathlib import Path

_src_path = str(Path(__file__).parent / "src")
if _src_path not in sys.path:
    sys.path.insert(0, _src_path)

import config
from frames.exceptions import FrameError
from motion.statistics import exact_magnitude, quick_sqrt_magnitude
from pipeline.find_motion import FindMotionPipeline


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Estimate 16x16 block motion vectors between two grayscale frames."
    )
    parser.add_argument("prev", type=str, nargs="?", default="1.pgm")
    parser.add_argument("curr", type=str, nargs="?", default="2.pgm")
    parser.add_argument("--median-mode", choices=["raster", "snapshot"], default=config.MEDIAN_MODE)
    parser.add_argument("--workers", type=int, default=config.ESTIMATOR_WORKERS)
    parser.add_argument("--exact-sqrt", action="store_true")
    parser.add_argument("--true-min", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    pipeline = FindMotionPipeline(
        median_mode=args.median_mode,
        workers=args.workers,
        magnitude=exact_magnitude if args.exact_sqrt else quick_sqrt_magnitude,
        legacy_min=not args.true_min
    )

    try:
        result = pipeline.run_sources(args.prev, args.curr)
    except FrameError as e:
        raise SystemExit(f"Error: {e}")

    print(result.report, end="")


if __name__ == "__main__":
    main()
