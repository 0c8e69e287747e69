"""Chunk decomposition strategies.

A strategy turns the text accumulated by a document builder into an ordered
list of atomic chunks. Truncation never splits a chunk, so the strategy
decides what the smallest droppable unit is.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from checktext.config import ChunkMode


class ChunkStrategy(ABC):
    """Produce ordered atomic chunks from accumulated text."""

    @abstractmethod
    def chunks(self) -> list[str]:
        """Return a fresh list of chunks; equal on every call."""

    @abstractmethod
    def text(self) -> str:
        """Return the untruncated text."""


@dataclass(frozen=True)
class VerbatimChunks(ChunkStrategy):
    """Each appended piece of text is one chunk."""

    pieces: tuple[str, ...]

    def chunks(self) -> list[str]:
        return list(self.pieces)

    def text(self) -> str:
        return "".join(self.pieces)


@dataclass(frozen=True)
class LineChunks(ChunkStrategy):
    """Appended text is joined and split after every line terminator."""

    pieces: tuple[str, ...]

    def chunks(self) -> list[str]:
        return split_lines(self.text())

    def text(self) -> str:
        return "".join(self.pieces)


def split_lines(text: str) -> list[str]:
    """Split ``text`` immediately after each ``\\n`` (so ``\\r\\n`` stays whole).

    Unlike ``str.splitlines`` a lone ``\\r`` or other Unicode separators do not
    end a line. ``"".join(split_lines(text)) == text`` always holds.
    """

    if not text:
        return []
    lines = text.split("\n")
    chunks = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        chunks.append(lines[-1])
    return chunks


def strategy_for(mode: ChunkMode, pieces: Sequence[str]) -> ChunkStrategy:
    if mode is ChunkMode.LINES:
        return LineChunks(tuple(pieces))
    return VerbatimChunks(tuple(pieces))


__all__ = ["ChunkStrategy", "VerbatimChunks", "LineChunks", "split_lines", "strategy_for"]
