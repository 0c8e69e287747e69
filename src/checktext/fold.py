"""Size-bounded, chunk-atomic folding.

Chunks are accumulated left to right until the first one that does not fit.
From then on every chunk is dropped, and the truncation marker is appended,
evicting the most recently kept chunk once if the marker would not fit
otherwise.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from checktext.config import Measure

logger = logging.getLogger(__name__)


class BudgetTooSmallError(ValueError):
    """Raised when a size budget cannot hold the truncation marker."""

    def __init__(self, max_size: int, marker_size: int, measure: Measure) -> None:
        super().__init__(
            "Maximum length is less than truncation text. "
            f"(max_size={max_size}, marker={marker_size} {measure.value})"
        )
        self.max_size = max_size
        self.marker_size = marker_size
        self.measure = measure


class FoldAccumulator:
    """Accumulator for a single fold over an ordered chunk sequence.

    ``truncated`` only ever flips from False to True. Accumulators built over
    consecutive slices of one chunk list may be merged with ``combine`` in
    slice order; merging out of order reorders the output.
    """

    def __init__(self, max_size: int, measure: Measure, marker: str) -> None:
        marker_size = measure.size(marker)
        if max_size < marker_size:
            raise BudgetTooSmallError(max_size, marker_size, measure)
        self.max_size = max_size
        self.measure = measure
        self.marker = marker
        self.chunks: list[str] = []
        self.total = 0
        self.truncated = False
        self.dropped = 0

    def add(self, chunk: str) -> None:
        if self.truncated:
            self.dropped += 1
            return
        size = self.measure.size(chunk)
        if self.total + size > self.max_size:
            self.truncated = True
            self.dropped += 1
            return
        self.chunks.append(chunk)
        self.total += size

    def extend(self, chunks: Iterable[str]) -> FoldAccumulator:
        for chunk in chunks:
            self.add(chunk)
        return self

    def combine(self, other: FoldAccumulator) -> FoldAccumulator:
        """Replay ``other``'s kept chunks into this accumulator.

        ``other`` must cover the chunks that come after this accumulator's.
        If ``other`` had already overflowed on its own, this accumulator is
        marked truncated after the replay.
        """

        if (other.max_size, other.measure, other.marker) != (self.max_size, self.measure, self.marker):
            raise ValueError("cannot combine accumulators with different budgets")
        for chunk in other.chunks:
            self.add(chunk)
        if other.truncated and not self.truncated:
            self.truncated = True
        self.dropped += other.dropped
        return self

    def finish(self) -> list[str]:
        """Return the kept chunks, ending with the marker if anything was dropped."""

        kept = list(self.chunks)
        if not self.truncated:
            return kept

        total = self.total
        marker_size = self.measure.size(self.marker)
        evicted = False
        if total + marker_size > self.max_size and kept:
            total -= self.measure.size(kept.pop())
            evicted = True
        kept.append(self.marker)

        logger.debug(
            "truncated to %d %s: kept=%d dropped=%d evicted=%s",
            total + marker_size,
            self.measure.value,
            len(kept) - 1,
            self.dropped + int(evicted),
            evicted,
        )
        return kept

    def join(self) -> str:
        return "".join(self.finish())


def fold_chunks(chunks: Iterable[str], max_size: int, measure: Measure, marker: str) -> list[str]:
    """Fold ``chunks`` into a list that fits ``max_size`` under ``measure``.

    Raises ``BudgetTooSmallError`` before looking at any chunk when the marker
    alone exceeds the budget.
    """

    return FoldAccumulator(max_size, measure, marker).extend(chunks).finish()


def fold_partitions(
    partitions: Sequence[Iterable[str]], max_size: int, measure: Measure, marker: str
) -> list[str]:
    """Fold each partition separately and merge them left to right.

    Equivalent to ``fold_chunks`` over the concatenated partitions.
    """

    accumulators = [FoldAccumulator(max_size, measure, marker).extend(part) for part in partitions]
    if not accumulators:
        return FoldAccumulator(max_size, measure, marker).finish()
    merged = accumulators[0]
    for accumulator in accumulators[1:]:
        merged.combine(accumulator)
    return merged.finish()


__all__ = ["BudgetTooSmallError", "FoldAccumulator", "fold_chunks", "fold_partitions"]
