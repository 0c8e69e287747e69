"""Eagerly truncating text buffer.

Unlike ``TextDocument``, which keeps everything and decides at render time,
``CappedTextBuffer`` decides on every append: once a piece would not leave
room for the marker, the marker is written and the buffer stops accepting
text.
"""

from __future__ import annotations

from checktext.config import Measure


class CappedTextBuffer:
    def __init__(self, max_size: int, truncation_text: str, *, measure: Measure = Measure.CHARS) -> None:
        self.max_size = max_size
        self.truncation_text = truncation_text
        self.measure = measure
        self._parts: list[str] = []
        self._size = 0
        self._full = False

    @property
    def is_full(self) -> bool:
        return self._full

    def append(self, text: str) -> CappedTextBuffer:
        """Append ``text`` if it and the marker still fit; otherwise write the marker and stop."""

        if self._full:
            return self
        size = self.measure.size(text)
        if self._size + size + self.measure.size(self.truncation_text) > self.max_size:
            self._parts.append(self.truncation_text)
            self._size += self.measure.size(self.truncation_text)
            self._full = True
            return self
        self._parts.append(text)
        self._size += size
        return self

    def __str__(self) -> str:
        return "".join(self._parts)


__all__ = ["CappedTextBuffer"]
