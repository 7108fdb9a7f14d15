"""
Configuration constants for block-based motion estimation.
Defaults reproduce the classic 720x480 full-search setup.
"""

import cv2

# =============================================================================
# Frame Settings
# =============================================================================
FRAME_WIDTH = 720
FRAME_HEIGHT = 480
FRAME_READ_FLAG = cv2.IMREAD_GRAYSCALE  # Frames are 8-bit luma only
MIN_FRAME_SIZE = 3  # Median window needs at least one interior pixel

# =============================================================================
# Noise Reduction (3x3 median)
# =============================================================================
MEDIAN_KERNEL = 3
MEDIAN_MODE = "raster"  # "raster" = in-place scan order, "snapshot" = double-buffered

# =============================================================================
# Block Matching (full search)
# =============================================================================
BLOCK_SIZE = 16  # BSIZE: block edge in pixels
MOTION_STEP = 8  # MSTEP: pixels between neighbouring motion vectors
SEARCH_RANGE = 16  # R: displacements span [-R, R-1] on each axis
ESTIMATOR_WORKERS = 1  # >1 distributes block rows over a thread pool

# =============================================================================
# Field Statistics
# =============================================================================
QUICK_SQRT_MAGIC = 0x5f375a86
QUICK_SQRT_ITERATIONS = 3  # Newton-Raphson refinements
LEGACY_MIN_STATISTIC = True  # Min accumulator starts at 0, so min always reports 0

# =============================================================================
# Reporting
# =============================================================================
REPORT_CELL_WIDTH = 7  # Each "dx,dy" cell is right-justified to this width
