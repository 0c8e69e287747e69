"""Chunk-atomic, size-bounded text truncation for reporting APIs."""

from checktext.capped import CappedTextBuffer
from checktext.config import ChunkMode, Measure, TruncateDirection
from checktext.document import TextDocument, TextDocumentBuilder
from checktext.fold import BudgetTooSmallError, FoldAccumulator, fold_chunks, fold_partitions

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BudgetTooSmallError",
    "CappedTextBuffer",
    "ChunkMode",
    "FoldAccumulator",
    "Measure",
    "TextDocument",
    "TextDocumentBuilder",
    "TruncateDirection",
    "fold_chunks",
    "fold_partitions",
]
