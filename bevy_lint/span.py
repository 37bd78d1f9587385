"""Source locations."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Span:
    """A half-open byte range ``[lo, hi)`` in a source file."""

    lo: int
    hi: int

    def __post_init__(self) -> None:
        if self.lo < 0 or self.hi < self.lo:
            raise ValueError(f"invalid span [{self.lo}, {self.hi})")

    @classmethod
    def from_seq(cls, value: Sequence[int]) -> "Span":
        lo, hi = value
        return cls(int(lo), int(hi))

    @property
    def is_empty(self) -> bool:
        return self.lo == self.hi

    def overlaps(self, other: "Span") -> bool:
        # Two insertions at the same offset also conflict.
        return (self.lo < other.hi and other.lo < self.hi) or self == other

    def to_list(self) -> List[int]:
        return [self.lo, self.hi]


class SourceMap:
    """Map byte offsets of one source text to 1-based lines and columns."""

    def __init__(self, text: str, path: str = "<unknown>") -> None:
        self.text = text
        self.path = path
        self._data = text.encode("utf-8")
        self._line_starts = [0]
        for index, byte in enumerate(self._data):
            if byte == 0x0A:
                self._line_starts.append(index + 1)

    def contains(self, span: Span) -> bool:
        return span.hi <= len(self._data)

    def snippet(self, span: Span) -> Optional[str]:
        """Return the source text covered by ``span``, or ``None`` if out of range."""

        if not self.contains(span):
            return None
        try:
            return self._data[span.lo : span.hi].decode("utf-8")
        except UnicodeDecodeError:
            return None

    def line_col(self, offset: int) -> Tuple[int, int]:
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return line + 1, offset - self._line_starts[line] + 1

    def line_text(self, line: int) -> str:
        start = self._line_starts[line - 1]
        end = self._line_starts[line] - 1 if line < len(self._line_starts) else len(self._data)
        return self._data[start:end].decode("utf-8", errors="replace")

    def location(self, span: Span) -> str:
        line, col = self.line_col(span.lo)
        return f"{self.path}:{line}:{col}"
