"""Immutable text documents and their builder.

A ``TextDocument`` keeps every appended piece of text. Truncation happens only
when a document is sized with ``build_by_bytes`` or ``build_by_chars``;
``str(document)`` always returns the full text.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from checktext.chunking import ChunkStrategy, strategy_for
from checktext.config import DEFAULT_TRUNCATION_TEXT, ChunkMode, Measure, TruncateDirection
from checktext.fold import fold_chunks


class TextDocument(BaseModel):
    """Text assembled from chunks that can be rendered within a size budget."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pieces: tuple[str, ...] = Field(default_factory=tuple)
    truncation_text: str = DEFAULT_TRUNCATION_TEXT
    direction: TruncateDirection = TruncateDirection.END
    chunk_mode: ChunkMode = ChunkMode.VERBATIM

    @classmethod
    def from_string(cls, text: str, **kwargs: object) -> TextDocument:
        """Wrap one string, truncating on line boundaries."""

        return cls(pieces=(text,), chunk_mode=ChunkMode.LINES, **kwargs)

    def __str__(self) -> str:
        return self.strategy().text()

    def strategy(self) -> ChunkStrategy:
        return strategy_for(self.chunk_mode, self.pieces)

    def chunks(self) -> list[str]:
        return self.strategy().chunks()

    def build(self, max_size: int, measure: Measure = Measure.CHARS) -> str:
        """Return as many whole chunks as fit in ``max_size``, plus the marker if any were dropped.

        When truncating from the start the chunk order is reversed around the
        fold, so the earliest chunks are dropped and the marker ends up first.
        """

        chunks = self.chunks()
        if self.direction is TruncateDirection.START:
            chunks.reverse()
        kept = fold_chunks(chunks, max_size, measure, self.truncation_text)
        if self.direction is TruncateDirection.START:
            kept.reverse()
        return "".join(kept)

    def build_by_bytes(self, max_size: int) -> str:
        return self.build(max_size, Measure.BYTES)

    def build_by_chars(self, max_size: int) -> str:
        return self.build(max_size, Measure.CHARS)


class TextDocumentBuilder:
    """Accumulate chunks and truncation options for a ``TextDocument``."""

    def __init__(self) -> None:
        self._pieces: list[str] = []
        self._truncation_text = DEFAULT_TRUNCATION_TEXT
        self._direction = TruncateDirection.END
        self._chunk_mode = ChunkMode.VERBATIM

    def add_text(self, chunk: str) -> TextDocumentBuilder:
        if not isinstance(chunk, str):
            raise TypeError(f"chunk must be a string, got {type(chunk).__name__}")
        self._pieces.append(chunk)
        return self

    def with_truncation_text(self, truncation_text: str) -> TextDocumentBuilder:
        if not isinstance(truncation_text, str):
            raise TypeError(f"truncation text must be a string, got {type(truncation_text).__name__}")
        self._truncation_text = truncation_text
        return self

    def set_truncate_start(self) -> TextDocumentBuilder:
        self._direction = TruncateDirection.START
        return self

    def set_chunk_on_newlines(self) -> TextDocumentBuilder:
        self._chunk_mode = ChunkMode.LINES
        return self

    def build(self) -> TextDocument:
        return TextDocument(
            pieces=tuple(self._pieces),
            truncation_text=self._truncation_text,
            direction=self._direction,
            chunk_mode=self._chunk_mode,
        )


__all__ = ["TextDocument", "TextDocumentBuilder"]
