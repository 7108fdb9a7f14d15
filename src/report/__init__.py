"""Text reporting module."""

from .field_reporter import FieldReporter, format_summary, render_motion_vectors

__all__ = [
    "FieldReporter",
    "format_summary",
    "render_motion_vectors"
]
