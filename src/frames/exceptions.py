"""
Frame Exceptions

Errors raised at the boundary where frames enter the motion pipeline.
"""


class FrameError(Exception):
    """Base class for every frame-level failure."""
    pass


class FrameLoadError(FrameError):
    """
    Raised when an image source cannot be turned into a grayscale frame.

    This can occur due to:
    - Missing or unreadable file
    - Format OpenCV cannot decode
    - Array with an unsupported shape or channel count
    """
    pass


class InvalidBufferSizeError(FrameError, ValueError):
    """Non-positive dimensions, or a sample count that is not width * height."""
    pass


class DimensionMismatchError(FrameError, ValueError):
    """The previous and current frames differ in width or height."""
    pass


class AllocationFailure(FrameError, MemoryError):
    """The motion field or a scratch buffer could not be allocated."""
    pass
