"""
Text rendering of motion fields and their statistics.
Produces strings only; printing is left to the caller.
"""

from typing import Optional

from config import REPORT_CELL_WIDTH
from motion.motion_field import MotionField
from motion.statistics import FieldSummary


class FieldReporter:
    """Renders a motion field as a grid of right-justified "dx,dy" cells."""

    def __init__(self, cell_width: int = REPORT_CELL_WIDTH):
        self.cell_width = cell_width

    def render(self, field: Optional[MotionField]) -> str:
        """
        One line per grid row, nx cells per line, each line ending in a newline.

        Raises:
            ValueError: If the field is missing or empty
        """
        if field is None or field.size == 0:
            raise ValueError("Cannot render an empty motion field")

        lines = []
        for row in field.vectors.tolist():
            lines.append("".join(f"{dx},{dy}".rjust(self.cell_width) for dx, dy in row))
        return "\n".join(lines) + "\n"

    def render_report(self, field: MotionField, summary: FieldSummary,
                      filter_ms: Optional[int] = None,
                      estimate_ms: Optional[int] = None) -> str:
        """Full report: field grid, magnitude summary and optional timings."""
        parts = [
            "\nThe motion vector field is as follows:\n\n",
            self.render(field),
            "\n",
            format_summary(summary),
        ]
        if filter_ms is not None:
            parts.append(f"It took {filter_ms} milliseconds to filter the two images.\n")
        if estimate_ms is not None:
            parts.append(f"It took {estimate_ms} milliseconds to estimate the motion field.\n")
        return "".join(parts)


def format_summary(summary: FieldSummary) -> str:
    return (
        f"The motion vectors have a mean of {summary.mean:4.1f} pixels.\n"
        f"The motion vectors range between {summary.min:4.1f} and {summary.max:4.1f} pixels.\n"
    )


def render_motion_vectors(field: MotionField) -> str:
    """Render `field` with the default cell width."""
    return FieldReporter().render(field)
