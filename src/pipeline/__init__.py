"""Pipeline orchestration module."""

from .find_motion import FindMotionPipeline, MotionResult

__all__ = [
    "FindMotionPipeline",
    "MotionResult"
]
