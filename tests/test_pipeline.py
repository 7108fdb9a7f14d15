"""
End-to-end tests for the find-motion pipeline and its command-line entry point.
"""

import importlib.util

import cv2
import numpy as np
import pytest

# Add src to path for imports
import sys
from pathlib import Path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))

from frames.buffer import PixelBuffer, load_frame
from frames.exceptions import DimensionMismatchError, InvalidBufferSizeError
from motion.estimator import MotionEstimator
from motion.motion_field import MotionVector
from pipeline.find_motion import FindMotionPipeline


def _load_cli():
    module_spec = importlib.util.spec_from_file_location("find_motion_cli", ROOT / "find_motion.py")
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class FakeClock:
    """Returns scripted timestamps in seconds."""

    def __init__(self, ticks):
        self._ticks = list(ticks)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self._ticks.pop(0)


class TestFindMotionPipeline:
    """Tests for FindMotionPipeline."""

    @pytest.fixture
    def texture(self):
        rng = np.random.default_rng(21)
        return rng.integers(0, 256, size=(96, 128), dtype=np.uint8)

    def test_identical_small_frames(self):
        """Two identical 32x32 frames give an all-zero 4x4 field."""
        image = np.random.default_rng(0).integers(0, 256, size=(32, 32), dtype=np.uint8)
        prev = PixelBuffer.from_array(image)
        curr = PixelBuffer.from_array(image)

        result = FindMotionPipeline().run(prev, curr)

        assert (result.field.nx, result.field.ny) == (4, 4)
        assert not np.any(result.field.vectors)
        assert result.summary.min == 0.0
        assert result.summary.max == pytest.approx(0.0, abs=1e-6)
        assert "The motion vector field is as follows:" in result.report

    def test_translation_snapshot_mode(self, texture):
        """Order-independent filtering keeps a pure translation exact."""
        prev = PixelBuffer.from_array(texture)
        curr = PixelBuffer.from_array(np.roll(texture, shift=(-2, 3), axis=(0, 1)))

        result = FindMotionPipeline(median_mode="snapshot").run(prev, curr)
        cols, rows = MotionEstimator().scan_region(result.field.nx, result.field.ny)

        for idy in rows:
            for idx in cols:
                assert result.field.get(idx, idy) == MotionVector(-3, 2)
        assert result.summary.max == pytest.approx(np.sqrt(13), rel=0.002)

    def test_frames_filtered_in_place(self, texture):
        prev = PixelBuffer.from_array(texture)
        curr = PixelBuffer.from_array(texture)

        FindMotionPipeline().run(prev, curr)

        assert not np.array_equal(prev.pixels, texture)
        np.testing.assert_array_equal(prev.pixels[0], texture[0])

    def test_clock_timings(self):
        """Timings come only from the injected clock."""
        clock = FakeClock([10.0, 10.25, 11.0])
        frame = PixelBuffer.from_array(np.zeros((32, 32), dtype=np.uint8))

        result = FindMotionPipeline(clock=clock).run(frame, frame.copy())

        assert clock.calls == 3
        assert result.filter_ms == 250
        assert result.estimate_ms == 750
        assert "It took 250 milliseconds to filter the two images." in result.report

    def test_busy_signal(self):
        """The signal port is raised before computing and lowered after."""
        events = []
        frame = PixelBuffer.from_array(np.zeros((32, 32), dtype=np.uint8))

        FindMotionPipeline(signal=events.append).run(frame, frame.copy())

        assert events == [True, False]

    def test_dimension_mismatch(self):
        events = []
        prev = PixelBuffer.from_array(np.zeros((32, 32), dtype=np.uint8))
        curr = PixelBuffer.from_array(np.zeros((32, 40), dtype=np.uint8))

        with pytest.raises(DimensionMismatchError):
            FindMotionPipeline(signal=events.append).run(prev, curr)
        assert events == []

    @pytest.mark.parametrize("height, width", [(5, 5), (6, 40), (40, 7)])
    def test_frame_smaller_than_grid_step(self, height, width):
        """Frames that load but hold no grid cell are rejected as a frame error."""
        events = []
        prev = load_frame(np.full((height, width), 7, dtype=np.uint8))
        curr = load_frame(np.full((height, width), 7, dtype=np.uint8))

        with pytest.raises(InvalidBufferSizeError):
            FindMotionPipeline(signal=events.append).run(prev, curr)
        assert events == []
        assert np.all(prev.pixels == 7)

    def test_frame_exactly_one_grid_step(self):
        """An 8x8 frame yields a single zero cell."""
        frame = load_frame(np.full((8, 8), 7, dtype=np.uint8))

        result = FindMotionPipeline().run(frame, frame.copy())

        assert (result.field.nx, result.field.ny) == (1, 1)
        assert not np.any(result.field.vectors)

    def test_run_sources_files(self, tmp_path, texture):
        cv2.imwrite(str(tmp_path / "1.pgm"), texture)
        cv2.imwrite(str(tmp_path / "2.pgm"), texture)

        result = FindMotionPipeline().run_sources(tmp_path / "1.pgm", tmp_path / "2.pgm")

        assert (result.field.nx, result.field.ny) == (16, 12)
        assert not np.any(result.field.vectors)


class TestCommandLine:
    """Tests for the find_motion.py entry point."""

    def test_prints_report(self, tmp_path, capsys):
        image = np.full((32, 32), 50, dtype=np.uint8)
        cv2.imwrite(str(tmp_path / "1.pgm"), image)
        cv2.imwrite(str(tmp_path / "2.pgm"), image)

        _load_cli().main([str(tmp_path / "1.pgm"), str(tmp_path / "2.pgm")])
        out = capsys.readouterr().out

        assert "The motion vector field is as follows:" in out
        assert "    0,0    0,0    0,0    0,0" in out
        assert "The motion vectors range between  0.0 and  0.0 pixels." in out

    def test_missing_frame_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            _load_cli().main([str(tmp_path / "1.pgm"), str(tmp_path / "2.pgm")])

    def test_frame_smaller_than_grid_step_exits(self, tmp_path):
        """A 6x5 PGM loads fine but ends in SystemExit, not a traceback."""
        image = np.full((5, 6), 50, dtype=np.uint8)
        cv2.imwrite(str(tmp_path / "1.pgm"), image)
        cv2.imwrite(str(tmp_path / "2.pgm"), image)

        with pytest.raises(SystemExit) as excinfo:
            _load_cli().main([str(tmp_path / "1.pgm"), str(tmp_path / "2.pgm")])
        assert "grid step" in str(excinfo.value)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
