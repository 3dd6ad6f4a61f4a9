"""Offset to line/column conversion for answer text."""

import re
from bisect import bisect_right

from .models import Location


class TextIndex:
    """Precomputed line starts for a piece of text.

    Lines are split on ``\\n`` only, matching how violations are reported.
    """

    def __init__(self, text: str):
        self.text = text
        self.line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def location(self, offset: int) -> Location:
        """Convert a character offset to a 1-based location.

        Args:
            offset: Character offset into the text (clamped to its bounds)

        Returns:
            Location of the offset
        """
        offset = max(0, min(offset, len(self.text)))
        line_idx = bisect_right(self.line_starts, offset) - 1
        return Location(line=line_idx + 1, column=offset - self.line_starts[line_idx] + 1)

    def line_span(self, line_number: int) -> tuple[int, int]:
        """Get the offsets of a 1-based line, excluding its newline.

        Args:
            line_number: 1-based line number

        Returns:
            (start, end) offsets
        """
        start = self.line_starts[line_number - 1]
        if line_number < len(self.line_starts):
            end = self.line_starts[line_number] - 1
        else:
            end = len(self.text)
        return start, end

    def find(self, needle: str, start: int = 0) -> Location | None:
        """Locate the first occurrence of a substring.

        Args:
            needle: Text to search for
            start: Offset to start searching from

        Returns:
            Location of the match, or None when absent
        """
        offset = self.text.find(needle, start)
        if offset == -1:
            return None
        return self.location(offset)

    @property
    def line_count(self) -> int:
        return len(self.line_starts)
